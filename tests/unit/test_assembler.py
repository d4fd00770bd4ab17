from pathlib import Path

import pytest

from macocr.ocr.assembler import assemble_bytes, assemble_result
from macocr.ocr.base import BoundingBox
from tests.stubs import StubEngine, make_observation


class TestAssembleBytes:
    def test_joins_lines_with_trailing_newlines(self, png_bytes: bytes, stub_engine: StubEngine) -> None:
        result = assemble_bytes(png_bytes, stub_engine)

        assert result.text == "Hello\nWorld\n"
        assert result.engine_error is None

    def test_reports_image_dimensions(self, png_bytes: bytes, stub_engine: StubEngine) -> None:
        result = assemble_bytes(png_bytes, stub_engine)

        assert (result.image_width, result.image_height) == (100, 200)

    def test_boxes_follow_engine_order_in_pixel_space(
        self, png_bytes: bytes, stub_engine: StubEngine
    ) -> None:
        result = assemble_bytes(png_bytes, stub_engine)

        assert [line.text for line in result.boxes] == ["Hello", "World"]
        hello = result.boxes[0].box
        assert hello.x == pytest.approx(10.0)
        assert hello.y == pytest.approx(20.0)
        assert hello.w == pytest.approx(50.0)
        assert hello.h == pytest.approx(20.0)

    def test_whole_unit_square_maps_to_whole_image(self, png_bytes: bytes) -> None:
        engine = StubEngine([make_observation("page", 0.0, 0.0, 1.0, 1.0)])

        result = assemble_bytes(png_bytes, engine)

        assert result.boxes[0].box == BoundingBox(x=0.0, y=0.0, w=100.0, h=200.0)

    def test_no_observations_gives_empty_result(self, png_bytes: bytes) -> None:
        result = assemble_bytes(png_bytes, StubEngine([]))

        assert result.text == ""
        assert result.boxes == []
        assert result.engine_error is None

    def test_engine_failure_is_reported_not_raised(self, png_bytes: bytes) -> None:
        result = assemble_bytes(png_bytes, StubEngine(error="backend exploded"))

        assert result.text == ""
        assert result.boxes == []
        assert result.engine_error == "backend exploded"

    def test_undecodable_image_keeps_text_with_empty_boxes(self, stub_engine: StubEngine) -> None:
        result = assemble_bytes(b"not decodable", stub_engine)

        assert result.text == "Hello\nWorld\n"
        assert (result.image_width, result.image_height) == (0, 0)
        assert all(line.box == BoundingBox(0.0, 0.0, 0.0, 0.0) for line in result.boxes)

    def test_same_bytes_same_result(self, png_bytes: bytes, stub_engine: StubEngine) -> None:
        assert assemble_bytes(png_bytes, stub_engine) == assemble_bytes(png_bytes, stub_engine)


class TestAssembleResult:
    def test_reads_file_once_and_passes_bytes_to_engine(
        self, tmp_path: Path, png_bytes: bytes, stub_engine: StubEngine
    ) -> None:
        path = tmp_path / "scan.png"
        path.write_bytes(png_bytes)

        result = assemble_result(path, stub_engine)

        assert result.text == "Hello\nWorld\n"
        assert stub_engine.calls == [png_bytes]

    def test_missing_file_raises(self, tmp_path: Path, stub_engine: StubEngine) -> None:
        with pytest.raises(FileNotFoundError):
            assemble_result(tmp_path / "missing.png", stub_engine)
