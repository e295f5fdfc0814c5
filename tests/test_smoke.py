"""Smoke tests to verify package structure and imports."""


def test_imports_core() -> None:
    """Test that core package can be imported."""
    import occfs.core  # noqa: F401


def test_imports_fs() -> None:
    """Test that fs package can be imported."""
    import occfs.fs  # noqa: F401


def test_imports_snapshot() -> None:
    """Test that snapshot package can be imported."""
    import occfs.snapshot  # noqa: F401


def test_imports_cli() -> None:
    """Test that cli package can be imported."""
    import occfs.cli  # noqa: F401


def test_imports_utils() -> None:
    """Test that utils package can be imported."""
    import occfs.utils  # noqa: F401


def test_top_level_exports() -> None:
    """Test that the public API is re-exported from the package root."""
    import occfs

    for name in occfs.__all__:
        assert hasattr(occfs, name), name
    assert occfs.__version__ == "0.1.0"
