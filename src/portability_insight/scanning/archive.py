"""Archive loader: the only I/O boundary of the engine.

Unpacks a zip blob entirely in memory. Nothing is written to disk, so
hostile entry names (absolute paths, ``..`` segments) are inert: they only
ever become dictionary keys.
"""

from __future__ import annotations

import io
import zipfile
import zlib
from dataclasses import dataclass, field
from typing import Union

from ..exceptions import ArchiveCorruptError
from ..logging_config import get_logger
from ..models import FileTable

logger = get_logger(__name__)


@dataclass
class LoadedArchive:
    """Decoded archive contents.

    ``total_files`` counts every archive entry, directory entries
    included; ``files`` holds only regular files.
    """

    files: FileTable = field(default_factory=dict)
    total_files: int = 0


def load_archive(blob: Union[bytes, bytearray, memoryview]) -> LoadedArchive:
    """Decode a zip archive into a file table.

    Raises:
        ArchiveCorruptError: If the blob is not a readable zip archive or
            an entry fails to decompress.
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(bytes(blob)))
    except zipfile.BadZipFile as e:
        raise ArchiveCorruptError(str(e) or "not a zip archive")
    except (OSError, ValueError, EOFError) as e:
        raise ArchiveCorruptError(f"unreadable archive: {e}")

    with archive:
        entries = archive.infolist()
        files: FileTable = {}

        for info in entries:
            if info.is_dir():
                continue
            try:
                raw = archive.read(info)
            except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError) as e:
                raise ArchiveCorruptError(str(e) or "corrupt entry", entry=info.filename)
            except RuntimeError as e:
                # Encrypted entries without a password
                raise ArchiveCorruptError(str(e), entry=info.filename)
            files[info.filename] = raw.decode("utf-8", errors="replace")

    logger.debug(f"Archive loaded: {len(entries)} entries, {len(files)} files")
    return LoadedArchive(files=files, total_files=len(entries))
