import time
from typing import List, Optional, Sequence

from macocr.ocr.base import OcrEngine, OcrEngineError, TextObservation


def make_observation(
    text: str, left: float, bottom: float, right: float, top: float, confidence: float = 0.9
) -> TextObservation:
    """Axis-aligned observation from normalized edges (origin bottom-left)."""
    return TextObservation(
        text=text,
        confidence=confidence,
        top_left=(left, top),
        top_right=(right, top),
        bottom_right=(right, bottom),
        bottom_left=(left, bottom),
    )


class StubEngine(OcrEngine):
    """Deterministic engine: returns canned observations, or fails."""

    name = "stub"

    def __init__(
        self,
        observations: Sequence[TextObservation] = (),
        error: Optional[str] = None,
        delay: float = 0.0,
    ) -> None:
        self._observations = list(observations)
        self._error = error
        self._delay = delay
        self.calls: List[bytes] = []

    def recognize(self, image_bytes: bytes) -> List[TextObservation]:
        self.calls.append(image_bytes)
        if self._delay:
            time.sleep(self._delay)
        if self._error is not None:
            raise OcrEngineError(self._error)
        return list(self._observations)
