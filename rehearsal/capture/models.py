from dataclasses import dataclass
from enum import Enum


class CaptureState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    FINALIZING = "finalizing"


@dataclass(frozen=True)
class Segment:
    """One speech-to-text result as emitted by the capture engine."""

    text: str
    is_final: bool
    result_index: int | None = None
