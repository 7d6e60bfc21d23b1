import csv
import io
import pytest
from asset_pipeline.models import FileRecord, FilterConfig
from asset_pipeline.reporting import TableReporter, format_meta, human_size


@pytest.mark.parametrize("size,expected", [
    (0, "0 B"),
    (1023, "1023 B"),
    (1024, "1.00 KB"),
    (2048, "2.00 KB"),
    (1536, "1.50 KB"),
    (5 * 1024 ** 2, "5.00 MB"),
    (3 * 1024 ** 3, "3.00 GB"),
])
def test_human_size(size, expected):
    assert human_size(size) == expected


def test_columns_follow_flags():
    reporter = TableReporter()
    assert reporter.columns(FilterConfig(compute_size=False)) == ["#", "Name"]
    assert reporter.columns(FilterConfig(compute_size=True, compute_hash=True, compute_meta=True)) == \
        ["#", "Name", "Size", "MD5", "Meta"]


def test_render_table():
    records = [
        FileRecord(name="a.jpg", size_bytes=2048, content_hash="abc"),
        FileRecord(name="bb.png", size_bytes=10, content_hash="def"),
    ]
    opts = FilterConfig(compute_size=True, compute_hash=True)
    text = TableReporter().render(records, opts, title="JPG files:")
    lines = text.splitlines()

    assert lines[0] == "JPG files:"
    assert lines[1] == lines[3] == lines[-1]
    assert lines[2].split("|")[1:-1] == [" # ", " Name   ", " Size    ", " MD5 "]
    assert "| 1 | a.jpg  | 2.00 KB | abc |" in lines
    assert "| 2 | bb.png | 10 B    | def |" in lines


def test_missing_optional_value_renders_empty_cell():
    # size/hash requested, but the record has none
    opts = FilterConfig(compute_size=True, compute_hash=True)
    row = TableReporter().rows([FileRecord(name="x.png")], opts)[0]
    assert row == ["1", "x.png", "", ""]


def test_meta_column():
    opts = FilterConfig(compute_size=False, compute_meta=True)
    rows = TableReporter().rows([FileRecord(name="x.jpg", meta={"b": "2", "a": "1"})], opts)
    assert rows == [["1", "x.jpg", "a=1, b=2"]]
    assert format_meta({}) == ""
    assert format_meta(None) == ""


def test_print_table_to_stream():
    stream = io.StringIO()
    TableReporter().print_table([], FilterConfig(compute_size=False), stream=stream)
    assert stream.getvalue().splitlines()[1] == "| # | Name |"


def test_write_csv(tmp_path):
    out = tmp_path / "report.csv"
    records = [FileRecord(name="a.jpg", size_bytes=2048, content_hash="abc")]
    TableReporter().write_csv(records, FilterConfig(compute_size=True, compute_hash=True), out)

    with open(out, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows == [["#", "Name", "Size", "MD5"], ["1", "a.jpg", "2048", "abc"]]
