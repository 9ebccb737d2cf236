"""Tests for writing results and naming outputs."""

import re

import pytest

from pdf_workbench.output import deliver, format_size, output_filename


def test_deliver_writes_bytes_unchanged(tmp_path):
    path = deliver(b"%PDF-1.7 data", "out.pdf", tmp_path / "nested")
    assert path == tmp_path / "nested" / "out.pdf"
    assert path.read_bytes() == b"%PDF-1.7 data"


@pytest.mark.parametrize("operation,prefix", [
    ("images", "images_merged"),
    ("merge", "merged"),
    ("split", "split"),
])
def test_timestamped_names(operation, prefix):
    assert re.fullmatch(rf"{prefix}_\d+\.pdf", output_filename(operation))


def test_compress_keeps_source_name():
    assert output_filename("compress", "dir/report.pdf") == "compressed_report.pdf"
    assert output_filename("resize", "photo.png") == "resized_photo.png"


@pytest.mark.parametrize("operation", ["rotate", "scan"])
def test_unknown_operation(operation):
    with pytest.raises(ValueError):
        output_filename(operation)


@pytest.mark.parametrize("size,expected", [
    (0, "0 Bytes"),
    (500, "500 Bytes"),
    (1024, "1 KB"),
    (1536, "1.5 KB"),
    (5 * 1024 * 1024, "5 MB"),
    (3 * 1024 ** 3, "3 GB"),
])
def test_format_size(size, expected):
    assert format_size(size) == expected
