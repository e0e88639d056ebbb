"""Shared test fixtures for Portability Insight."""

import io
import json
import zipfile

import pytest


def build_zip(files, dirs=()):
    """Build a zip archive in memory.

    ``files`` maps entry names to str or bytes content; ``dirs`` adds
    explicit directory entries.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_STORED) as zf:
        for name in dirs:
            zf.writestr(name.rstrip("/") + "/", "")
        for name, content in files.items():
            zf.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def make_zip():
    """Factory fixture: make_zip({"path": "content"}, dirs=("src/",)) -> bytes."""
    return build_zip


@pytest.fixture
def lovable_archive():
    """Proprietary manifest entry plus one source file importing a platform module."""
    manifest = {"dependencies": {"@lovable/core": "1.0.0", "react": "18.2.0"}}
    return build_zip(
        {
            "package.json": json.dumps(manifest),
            "src/App.tsx": 'import { Router } from "@lovable/router";\n',
        }
    )


@pytest.fixture
def local_hook_archive():
    """A single local use-toast import and nothing else."""
    return build_zip(
        {"src/App.tsx": 'import { useToast } from "@/hooks/use-toast";\n'}
    )


@pytest.fixture
def empty_archive():
    """A valid zip with no entries."""
    return build_zip({})
