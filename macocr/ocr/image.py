# macocr/ocr/image.py
import io
from pathlib import Path
from typing import Tuple, Union

import filetype
from PIL import Image


def is_image(data: bytes) -> bool:
    """
    Content sniffing: True if the leading bytes carry an image signature
    (PNG, JPEG, GIF, TIFF, WebP, HEIC, AVIF, ...). The file name / extension
    is never consulted and nothing is decoded, so very large images pass.
    """
    if not data:
        return False
    return filetype.is_image(data)


def is_image_file(path: Union[str, Path]) -> bool:
    try:
        return filetype.is_image(str(path))
    except OSError:
        return False


def probe_dimensions(data: bytes) -> Tuple[int, int]:
    """
    Fully decode the image and return (width, height).

    Dimensions are best-effort metadata: any decode failure gives (0, 0)
    instead of failing the recognition. That includes formats Pillow cannot
    open (HEIC) and images over Pillow's decompression-bomb limit.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            width, height = img.size
    except Exception:
        return 0, 0
    return int(width), int(height)
