import logging
import tarfile

import pytest

from tarstream import ZERO_BLOCK
from texstreamtool import log_level, main


@pytest.fixture
def stream_file(tmp_path, container, record):
    def write(config=None, entries=None):
        if entries is None:
            entries = [(0x1111, record()), (0x2222, record())]
        kwargs = {} if config is None else {"config": config}
        path = tmp_path / "MUPEN64PLUS.hts"
        path.write_bytes(container(entries, **kwargs).data)
        return path
    return write


def test_extract_to_file(tmp_path, stream_file):
    out = tmp_path / "out.tar"
    assert main(["-i", str(stream_file()), "-o", str(out), "-p", "MUPEN64PLUS"]) == 0

    with tarfile.open(out) as tar:
        assert tar.getnames() == ["MUPEN64PLUS#0000000000001111.bmp",
                                  "MUPEN64PLUS#0000000000002222.bmp"]
    assert out.read_bytes().endswith(ZERO_BLOCK * 2)


def test_long_options(tmp_path, stream_file):
    out = tmp_path / "out.tar"
    argv = ["--input", str(stream_file()), "--output", str(out),
            "--type", "TEX", "--ignore-error", "--bitmapv5"]
    assert main(argv) == 0
    with tarfile.open(out) as tar:
        assert len(tar.getnames()) == 2


def test_missing_input_file(tmp_path, caplog):
    assert main(["-i", str(tmp_path / "nope.hts")]) == 1
    assert "Could not open input file" in caplog.text


def test_unwritable_output(tmp_path, stream_file):
    out = tmp_path / "missing" / "out.tar"
    assert main(["-i", str(stream_file()), "-o", str(out)]) == 1


def test_input_required():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 1


def test_invalid_type(stream_file):
    with pytest.raises(SystemExit) as exc:
        main(["-i", str(stream_file()), "-t", "png"])
    assert exc.value.code == 1


def test_help():
    with pytest.raises(SystemExit) as exc:
        main(["-h"])
    assert exc.value.code == 0


def test_unsupported_variant(tmp_path, stream_file, caplog):
    out = tmp_path / "out.tar"
    assert main(["-i", str(stream_file(config=0x00400000)), "-o", str(out)]) == 2
    assert "gliden64-cache-extract" in caplog.text
    assert out.read_bytes() == b""


def test_conversion_error(tmp_path, stream_file, record):
    bad = record(size=0)
    out = tmp_path / "out.tar"
    path = stream_file(entries=[(1, bad)])
    assert main(["-i", str(path), "-o", str(out), "-e"]) == 2


def test_verbose_dump(tmp_path, stream_file, caplog):
    out = tmp_path / "out.tar"
    assert main(["-i", str(stream_file()), "-o", str(out), "-vv"]) == 0
    assert "checksum: 0x0000000000001111" in caplog.text
    assert "Extracted 2 files, skipped 0" in caplog.text


@pytest.mark.parametrize("verbose, level", [
    (0, logging.WARNING),
    (1, logging.INFO),
    (2, logging.DEBUG),
    (5, logging.DEBUG),
])
def test_log_level(verbose, level):
    assert log_level(verbose) == level
