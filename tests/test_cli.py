import io
import struct
import sys

from bmpfilters.bmp8 import Bmp8Image, load_bmp8
from bmpfilters.bmp24 import Bmp24Image, Pixel, load_bmp24
from bmpfilters.cli import Session, image_path, main, run
from bmpfilters.kernels import box_blur_kernel


def _reader(*tokens):
    items = iter(tokens)

    def read():
        try:
            return next(items)
        except StopIteration:
            raise EOFError from None

    return read


def _bmp8(width=4, height=3):
    header = bytearray(54)
    header[0:2] = b"BM"
    struct.pack_into("<I", header, 18, width)
    struct.pack_into("<I", header, 22, height)
    struct.pack_into("<H", header, 28, 8)
    struct.pack_into("<I", header, 34, width * height)
    data = bytearray((index * 20) % 256 for index in range(width * height))
    return Bmp8Image(
        header=bytes(header),
        color_table=bytes(1024),
        data=data,
        width=width,
        height=height,
        color_depth=8,
    )


def _bmp24():
    rows = [
        [Pixel(10, 200, 30), Pixel(0, 0, 0), Pixel(255, 128, 64)],
        [Pixel(90, 90, 90), Pixel(5, 250, 100), Pixel(40, 60, 80)],
        [Pixel(1, 2, 3), Pixel(100, 0, 200), Pixel(30, 30, 30)],
    ]
    return Bmp24Image(width=3, height=3, color_depth=24, data=rows)


def _session_with_bmp8(tmp_path):
    _bmp8().save(image_path(tmp_path, "gray"))
    session = Session(tmp_path, io.StringIO(), 8)
    session.open("gray")
    return session


def _session_with_bmp24(tmp_path):
    _bmp24().save(image_path(tmp_path, "colour"))
    session = Session(tmp_path, io.StringIO(), 24)
    session.open("colour")
    return session


def test_image_path_adds_extension(tmp_path):
    assert image_path(tmp_path, "lena") == tmp_path / "lena.bmp"


def test_open_missing_file_reports_name(tmp_path):
    session = Session(tmp_path, io.StringIO(), 8)
    assert session.open("missing") is False
    assert session.image8 is None
    assert "missing" in session.out.getvalue()


def test_open_loads_saved_image(tmp_path):
    session = _session_with_bmp8(tmp_path)
    assert session.image8.data == _bmp8().data
    assert session.image is session.image8


def test_failed_open_clears_previous_image(tmp_path):
    session = _session_with_bmp8(tmp_path)
    assert session.open("nothing_here") is False
    assert session.image8 is None


def test_save_without_image_writes_nothing(tmp_path):
    session = Session(tmp_path, io.StringIO(), 24)
    assert session.save("out") is False
    assert not image_path(tmp_path, "out").exists()


def test_save_round_trip(tmp_path):
    session = _session_with_bmp8(tmp_path)
    assert session.save("copy") is True
    assert load_bmp8(image_path(tmp_path, "copy")).data == session.image8.data


def test_apply_filter_without_image_reads_nothing(tmp_path):
    session = Session(tmp_path, io.StringIO(), 8)
    consumed = []

    def reader():
        consumed.append(True)
        return "0"

    assert session.apply_filter(2, reader) is False
    assert consumed == []


def test_negative_filter_on_bmp8(tmp_path):
    session = _session_with_bmp8(tmp_path)
    expected = _bmp8()
    expected.negative()
    assert session.apply_filter(1, _reader()) is True
    assert session.image8.data == expected.data


def test_brightness_prompts_until_in_range(tmp_path):
    session = _session_with_bmp8(tmp_path)
    expected = _bmp8()
    expected.brightness(-20)
    assert session.apply_filter(2, _reader("abc", "300", "-20")) is True
    assert session.image8.data == expected.data


def test_threshold_on_bmp8(tmp_path):
    session = _session_with_bmp8(tmp_path)
    expected = _bmp8()
    expected.threshold(100)
    assert session.apply_filter(3, _reader("-1", "100")) is True
    assert session.image8.data == expected.data


def test_box_blur_on_bmp8(tmp_path):
    session = _session_with_bmp8(tmp_path)
    expected = _bmp8()
    expected.apply_filter(box_blur_kernel())
    session.apply_filter(4, _reader())
    assert session.image8.data == expected.data


def test_grayscale_on_bmp24(tmp_path):
    session = _session_with_bmp24(tmp_path)
    expected = _bmp24()
    expected.grayscale()
    assert session.apply_filter(3, _reader()) is True
    assert session.image24.data == expected.data


def test_sharpen_on_bmp24(tmp_path):
    session = _session_with_bmp24(tmp_path)
    expected = _bmp24()
    expected.sharpen()
    session.apply_filter(6, _reader())
    assert session.image24.data == expected.data


def test_back_option_leaves_image_unchanged(tmp_path):
    session = _session_with_bmp8(tmp_path)
    assert session.apply_filter(9, _reader()) is False
    assert session.image8.data == _bmp8().data


def test_invalid_filter_option_leaves_image_unchanged(tmp_path):
    session = _session_with_bmp24(tmp_path)
    assert session.apply_filter(12, _reader()) is False
    assert session.image24.data == _bmp24().data


def test_show_info_for_bmp8(tmp_path):
    session = _session_with_bmp8(tmp_path)
    assert session.show_info() is True
    assert session.image8.info() in session.out.getvalue()


def test_show_info_unavailable_for_bmp24(tmp_path):
    session = _session_with_bmp24(tmp_path)
    assert session.show_info() is False


def test_equalize_bmp8(tmp_path):
    session = _session_with_bmp8(tmp_path)
    expected = _bmp8()
    expected.equalize()
    assert session.equalize() is True
    assert session.image8.data == expected.data


def test_run_full_bmp8_session(tmp_path):
    _bmp8().save(image_path(tmp_path, "img"))
    out = io.StringIO()
    script = _reader("8", "1", "img", "3", "1", "2", "result", "7")
    assert run(script, out, tmp_path) == 0
    expected = _bmp8()
    expected.negative()
    assert load_bmp8(image_path(tmp_path, "result")).data == expected.data


def test_run_switches_to_colour(tmp_path):
    _bmp24().save(image_path(tmp_path, "colour"))
    out = io.StringIO()
    script = _reader("8", "6", "24", "1", "colour", "3", "1", "2", "result", "7")
    assert run(script, out, tmp_path) == 0
    expected = _bmp24()
    expected.negative()
    assert load_bmp24(image_path(tmp_path, "result")).data == expected.data


def test_run_stops_at_end_of_input(tmp_path):
    out = io.StringIO()
    assert run(_reader("8", "1"), out, tmp_path) == 0
    assert not any(tmp_path.iterdir())


def test_main_reads_standard_input(tmp_path, monkeypatch, capsys):
    _bmp8().save(image_path(tmp_path, "img"))
    monkeypatch.setattr(sys, "stdin", io.StringIO("8\n1\nimg\n5\n2\nresult\n7\n"))
    assert main(["--images", str(tmp_path)]) == 0
    expected = _bmp8()
    expected.equalize()
    assert load_bmp8(image_path(tmp_path, "result")).data == expected.data
    assert "result" in capsys.readouterr().out