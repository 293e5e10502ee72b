"""Engine implementations shipped with overlaysync."""

from overlaysync.engines.recording import (
    CallLog,
    RecordedCall,
    RecordingEngine,
    RecordingSuite,
    RecordingUiExtension,
    RecordingVisualExtension,
)

__all__ = [
    "CallLog",
    "RecordedCall",
    "RecordingEngine",
    "RecordingSuite",
    "RecordingUiExtension",
    "RecordingVisualExtension",
]
