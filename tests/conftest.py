import pytest
from asset_pipeline.models import FilterConfig


@pytest.fixture
def options():
    """Hidden files excluded, size and hash computed, no embedded metadata."""
    return FilterConfig(exclude_hidden=True, compute_size=True, compute_hash=True, compute_meta=False)


@pytest.fixture
def image_tree(tmp_path):
    """A small tree of images, a hidden file, a text file and earlier output."""
    root = tmp_path / "assets"
    (root / "sub").mkdir(parents=True)
    (root / "compressed").mkdir()

    (root / "a.jpg").write_bytes(b"jpeg-a" * 10)
    (root / "b.png").write_bytes(b"png-b" * 20)
    (root / ".hidden.png").write_bytes(b"hidden")
    (root / "notes.txt").write_text("not an image")
    (root / "sub" / "c.jpeg").write_bytes(b"jpeg-c" * 5)
    (root / "compressed" / "a.jpg").write_bytes(b"old output")
    return root
