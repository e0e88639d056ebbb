"""Tests for the exception hierarchy."""

import pytest

from portability_insight.exceptions import (
    AnalysisError,
    ArchiveCorruptError,
    CatalogError,
    ConfigurationError,
    InvalidConfigError,
    PortabilityInsightError,
)


class TestHierarchy:
    """Test exception inheritance."""

    @pytest.mark.parametrize(
        "exc_class,parent",
        [
            (AnalysisError, PortabilityInsightError),
            (ArchiveCorruptError, AnalysisError),
            (ConfigurationError, PortabilityInsightError),
            (InvalidConfigError, ConfigurationError),
            (CatalogError, ConfigurationError),
        ],
    )
    def test_subclass(self, exc_class, parent):
        assert issubclass(exc_class, parent)


class TestMessages:
    """Test message and details formatting."""

    def test_plain_message(self):
        assert str(PortabilityInsightError("boom")) == "boom"

    def test_details_appended(self):
        err = PortabilityInsightError("boom", details={"a": "1", "b": "2"})
        assert str(err) == "boom (a=1, b=2)"

    def test_archive_corrupt(self):
        err = ArchiveCorruptError("File is not a zip file")
        assert err.message == "Could not read archive"
        assert err.reason == "File is not a zip file"
        assert err.entry is None
        assert str(err) == "Could not read archive (reason=File is not a zip file)"

    def test_archive_corrupt_with_entry(self):
        err = ArchiveCorruptError("Bad CRC-32", entry="src/App.tsx")
        assert str(err) == "Could not read archive (reason=Bad CRC-32, entry=src/App.tsx)"

    def test_invalid_config(self):
        err = InvalidConfigError("progress_every", 0, "must be at least 1")
        assert err.key == "progress_every"
        assert err.details["reason"] == "must be at least 1"
        assert "progress_every" in str(err)

    def test_catalog_error(self):
        err = CatalogError("catalog.toml", "file not found")
        assert err.source == "catalog.toml"
        assert str(err) == (
            "Invalid pattern catalog: catalog.toml (source=catalog.toml, reason=file not found)"
        )
