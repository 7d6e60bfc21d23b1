import pytest
from asset_pipeline.classification.kinds import (
    JPEG, PNG, ExtensionKind, FileKind, extension_of, get_kind, kind_for, register_kind, KINDS,
)
from asset_pipeline.classification.filter import FileFilter, filter_paths, is_hidden
from asset_pipeline.models import FilterConfig


def test_jpeg_matches_both_extensions():
    assert JPEG.matches("photos/a.jpg")
    assert JPEG.matches("photos/a.jpeg")
    assert not JPEG.matches("photos/a.png")
    assert JPEG.label() == "JPG"


def test_extension_match_is_case_sensitive():
    assert not JPEG.matches("A.JPG")
    assert not PNG.matches("b.PNG")
    assert PNG.matches("b.png")


def test_extension_of_uses_last_dot_of_base_name():
    assert extension_of("dir.d/archive.tar.png") == ".png"
    assert extension_of("dir.d/README") == ""
    assert extension_of(".png") == ".png"


def test_matches_is_idempotent_and_pure(tmp_path):
    # Path does not exist; classification must not care
    missing = str(tmp_path / "nowhere" / "x.png")
    assert PNG.matches(missing) == PNG.matches(missing) is True


def test_registry_lookup():
    assert get_kind("JPEG") is JPEG
    assert get_kind("png") is PNG
    with pytest.raises(KeyError):
        get_kind("tiff")


def test_kind_for_picks_first_match():
    assert kind_for("x.jpeg", [PNG, JPEG]) is JPEG
    assert kind_for("x.gif", [PNG, JPEG]) is None


def test_scenario_png_and_jpeg():
    paths = ["a.jpg", ".hidden.png", "compressed/out.png", "b.PNG"]
    opts = FilterConfig(exclude_hidden=True)
    assert filter_paths(paths, PNG, opts) == []
    assert filter_paths(paths, JPEG, opts) == ["a.jpg"]


def test_hidden_files_kept_when_not_excluded():
    opts = FilterConfig(exclude_hidden=False)
    assert filter_paths(["x/.hidden.png", "y.png"], PNG, opts) == ["x/.hidden.png", "y.png"]


def test_hidden_only_looks_at_base_name():
    assert is_hidden("dir/.git")
    assert not is_hidden(".config/photo.png")
    opts = FilterConfig(exclude_hidden=True)
    assert filter_paths([".config/photo.png"], PNG, opts) == [".config/photo.png"]


def test_compressed_marker_excluded_anywhere():
    opts = FilterConfig(exclude_hidden=False)
    paths = ["out/compressed/a.jpg", "compressed_a.jpg", "x/uncompressed.jpg", "keep.jpg"]
    assert filter_paths(paths, JPEG, opts) == ["keep.jpg"]


def test_filter_preserves_order_without_duplicates():
    opts = FilterConfig()
    paths = ["z.png", "a.jpg", "m.png", "z.png", "b.png", "m.png"]
    result = filter_paths(paths, PNG, opts)
    assert result == ["z.png", "m.png", "b.png"]
    # Result is a subsequence of the input
    it = iter(paths)
    assert all(p in it for p in result)


def test_new_kind_needs_no_filter_changes():
    webp = ExtensionKind("WEBP", {".webp"})
    assert isinstance(webp, FileKind)
    ff = FileFilter(webp, FilterConfig())
    assert ff.filter_files(["a.webp", "b.png", ".c.webp"]) == ["a.webp"]


def test_register_kind(monkeypatch):
    monkeypatch.setitem(KINDS, "gif", ExtensionKind("GIF", {".gif"}))
    assert get_kind("GIF").matches("anim.gif")
    register_kind("Tiff", ExtensionKind("TIFF", {".tif", ".tiff"}))
    try:
        assert get_kind("tiff").label() == "TIFF"
    finally:
        KINDS.pop("tiff")
