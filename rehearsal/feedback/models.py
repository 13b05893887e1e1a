from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Feedback:
    clarity: str
    relevance: str
    speech_pace: str
