# macocr/ocr/assembler.py
from pathlib import Path
from typing import List, Union

from ..logger import Log
from .base import OcrEngine, OcrEngineError, OcrLine, OcrResult
from .geometry import bounding_box
from .image import probe_dimensions


def assemble_result(path: Union[str, Path], engine: OcrEngine) -> OcrResult:
    """
    Read an image file once and run the full recognition pipeline on it.

    Raises:
        OSError: if the file cannot be read. Nothing else escapes; an engine
        failure comes back as an empty result with ``engine_error`` set.
    """
    data = Path(path).read_bytes()
    return assemble_bytes(data, engine)


def assemble_bytes(data: bytes, engine: OcrEngine) -> OcrResult:
    width, height = probe_dimensions(data)
    if width == 0 or height == 0:
        Log.warning("Could not determine image dimensions; boxes will be empty")

    try:
        observations = engine.recognize(data)
    except OcrEngineError as e:
        Log.warning(f"OCR engine '{engine.name}' failed: {e}")
        return OcrResult(text="", image_width=width, image_height=height, engine_error=str(e))

    lines: List[str] = []
    boxes: List[OcrLine] = []
    for obs in observations:
        lines.append(obs.text + "\n")
        boxes.append(OcrLine(text=obs.text, box=bounding_box(obs, width, height)))

    Log.debug(f"Recognized {len(boxes)} lines in {width}x{height} image")
    return OcrResult(text="".join(lines), image_width=width, image_height=height, boxes=boxes)
