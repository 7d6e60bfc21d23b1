import pytest
from asset_pipeline.exceptions import MissingFileError
from asset_pipeline.metadata.extract import (
    ExifMetadataReader, MetadataExtractor, NullMetadataReader,
)
from asset_pipeline.models import FileRecord, FilterConfig


def test_extract_with_hash(tmp_path, options):
    p = tmp_path / "pic.jpg"
    p.write_bytes(b"hello world")
    rec = MetadataExtractor().extract(p, options)
    assert rec == FileRecord(
        name="pic.jpg", size_bytes=11,
        content_hash="5eb63bbbe01eeed093cb22bb8f5acdc3", meta=None,
    )


def test_size_populated_even_when_flag_off(tmp_path):
    p = tmp_path / "pic.png"
    p.write_bytes(b"x" * 2048)
    rec = MetadataExtractor().extract(str(p), FilterConfig(compute_size=False))
    assert rec.size_bytes == 2048
    assert rec.content_hash is None
    assert rec.meta is None


def test_meta_stub_returns_empty_mapping(tmp_path):
    p = tmp_path / "pic.png"
    p.write_bytes(b"\x89PNG")
    rec = MetadataExtractor().extract(p, FilterConfig(compute_meta=True))
    assert rec.meta == {}
    assert NullMetadataReader().read(str(p)) == {}


def test_extraction_is_repeatable(tmp_path, options):
    p = tmp_path / "pic.jpg"
    p.write_bytes(b"some bytes" * 100)
    extractor = MetadataExtractor()
    first = extractor.extract(p, options)
    second = extractor.extract(p, options)
    assert first is not second
    assert (first.size_bytes, first.content_hash) == (second.size_bytes, second.content_hash)


def test_extraction_is_not_cached(tmp_path, options):
    p = tmp_path / "pic.jpg"
    p.write_bytes(b"one")
    extractor = MetadataExtractor()
    before = extractor.extract(p, options)
    p.write_bytes(b"two!")
    after = extractor.extract(p, options)
    assert before.content_hash != after.content_hash
    assert after.size_bytes == 4


def test_missing_file(tmp_path, options):
    with pytest.raises(MissingFileError) as excinfo:
        MetadataExtractor().extract(tmp_path / "gone.jpg", options)
    assert excinfo.value.stage == "extract"


def test_custom_reader_is_used(tmp_path):
    class FakeReader:
        def read(self, path):
            return {"Image Model": "TestCam"}

    p = tmp_path / "pic.jpg"
    p.write_bytes(b"data")
    rec = MetadataExtractor(reader=FakeReader()).extract(p, FilterConfig(compute_meta=True))
    assert rec.meta == {"Image Model": "TestCam"}


def test_exif_reader_filters_tags(monkeypatch, tmp_path):
    import asset_pipeline.metadata.extract as extract_module

    class FakeTag:
        def __init__(self, value):
            self.value = value

        def __str__(self):
            return self.value

    def fake_process_file(f, details=True):
        assert details is False
        return {"Image Model": FakeTag(" TestCam "), "Image Software": FakeTag("x")}

    monkeypatch.setattr(extract_module.exifread, "process_file", fake_process_file)

    p = tmp_path / "pic.jpg"
    p.write_bytes(b"data")
    assert ExifMetadataReader().read(str(p)) == {"Image Model": "TestCam"}
    assert ExifMetadataReader(tags=None).read(str(p)) == {"Image Model": "TestCam", "Image Software": "x"}
