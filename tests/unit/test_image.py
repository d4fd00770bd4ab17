from pathlib import Path

import pytest
from PIL import Image

from macocr.ocr.image import is_image, is_image_file, probe_dimensions


class TestIsImage:
    def test_png_is_image(self, png_bytes: bytes) -> None:
        assert is_image(png_bytes) is True

    def test_jpeg_is_image(self, jpeg_bytes: bytes) -> None:
        assert is_image(jpeg_bytes) is True

    def test_text_is_not_image(self) -> None:
        assert is_image(b"just some plain text\n") is False

    def test_empty_bytes_are_not_image(self) -> None:
        assert is_image(b"") is False


class TestIsImageFile:
    def test_sniffs_content_not_extension(self, tmp_path: Path, png_bytes: bytes) -> None:
        disguised = tmp_path / "notes.txt"
        disguised.write_bytes(png_bytes)

        assert is_image_file(disguised) is True

    def test_text_with_image_extension_is_rejected(self, tmp_path: Path) -> None:
        fake = tmp_path / "photo.png"
        fake.write_text("not really a png")

        assert is_image_file(fake) is False

    def test_missing_file_is_not_image(self, tmp_path: Path) -> None:
        assert is_image_file(tmp_path / "missing.png") is False


class TestProbeDimensions:
    def test_returns_pixel_size(self, png_bytes: bytes) -> None:
        assert probe_dimensions(png_bytes) == (100, 200)

    def test_jpeg_size(self, jpeg_bytes: bytes) -> None:
        assert probe_dimensions(jpeg_bytes) == (100, 200)

    def test_garbage_gives_zero(self) -> None:
        assert probe_dimensions(b"\x00\x01garbage") == (0, 0)

    def test_truncated_image_gives_zero(self, png_bytes: bytes) -> None:
        assert probe_dimensions(png_bytes[:40]) == (0, 0)


HEIC_HEADER = b"\x00\x00\x00\x18ftypheic\x00\x00\x00\x00mif1heic"
AVIF_HEADER = b"\x00\x00\x00\x1cftypavif\x00\x00\x00\x00avifmif1miaf"


class TestSignatures:
    @pytest.mark.parametrize("header", [HEIC_HEADER, AVIF_HEADER])
    def test_heif_family_is_image(self, header: bytes) -> None:
        assert is_image(header + b"\x00" * 64) is True

    def test_heic_file_is_image(self, tmp_path: Path) -> None:
        photo = tmp_path / "IMG_0001"
        photo.write_bytes(HEIC_HEADER + b"\x00" * 64)

        assert is_image_file(photo) is True

    def test_image_over_pixel_limit_is_still_image(
        self, monkeypatch: pytest.MonkeyPatch, png_bytes: bytes
    ) -> None:
        # 100x200 is far over twice this limit, so Pillow refuses to open it
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

        assert is_image(png_bytes) is True
        assert probe_dimensions(png_bytes) == (0, 0)
