# macocr/ocr/base.py
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# (x, y) in the unit square, origin bottom-left, y grows upward
Point = Tuple[float, float]


class OcrEngineError(Exception):
    """The recognition backend failed (as opposed to finding no text)."""


@dataclass(frozen=True)
class TextObservation:
    """One detected text line as reported by an engine, in normalized space."""

    text: str
    confidence: float
    top_left: Point
    top_right: Point
    bottom_right: Point
    bottom_left: Point

    @property
    def corners(self) -> Tuple[Point, Point, Point, Point]:
        return (self.top_left, self.top_right, self.bottom_right, self.bottom_left)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned pixel box, origin top-left, y grows downward."""

    x: float
    y: float
    w: float
    h: float


@dataclass(frozen=True)
class OcrLine:
    text: str
    box: BoundingBox


@dataclass
class OcrResult:
    text: str
    image_width: int
    image_height: int
    boxes: List[OcrLine] = field(default_factory=list)
    # set when the engine failed; text/boxes are then empty
    engine_error: Optional[str] = None


class OcrEngine:
    """
    OCR engine interface.

    Implementations (Apple Vision, PaddleOCR, ...) turn raw image bytes into
    one observation per detected text line, with corners normalized to the
    unit square (origin bottom-left). They raise OcrEngineError when the
    backend itself fails; "no text found" is an empty list.
    """

    name = "base"

    def recognize(self, image_bytes: bytes) -> List[TextObservation]:
        raise NotImplementedError("OCR engine must implement recognize()")
