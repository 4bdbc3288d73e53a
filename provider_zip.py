"""ZIP archive provider — serve the members of a .zip container."""

import io
import logging
import zipfile
import zlib
from typing import BinaryIO

from paths import normalize_path
from provider import Provider, Metadata, NotFoundError, ProviderError

log = logging.getLogger(__name__)


class ZipProvider(Provider):
    """Expose the files of a ZIP archive.

    The member index is built once, keyed by canonical path. Directory
    entries are not served.
    """

    def __init__(self, path: str):
        self._path = path
        try:
            self._zf = zipfile.ZipFile(path, "r")
        except FileNotFoundError as e:
            raise NotFoundError(f"Archive not found: {path}") from e
        except (zipfile.BadZipFile, OSError) as e:
            raise ProviderError(f"Cannot open ZIP file {path}: {e}") from e

        self._files: dict[str, zipfile.ZipInfo] = {}
        for zi in self._zf.infolist():
            if zi.is_dir():
                continue
            key = normalize_path(zi.filename)
            # Duplicate member names: the first one wins.
            self._files.setdefault(key, zi)
        log.info("Indexed %d files in %s", len(self._files), path)

    def __repr__(self):
        return f"ZipProvider({self._path!r})"

    def _lookup(self, path: str) -> zipfile.ZipInfo:
        zi = self._files.get(normalize_path(path))
        if zi is None:
            raise NotFoundError(f"Not found: {path}")
        return zi

    def reader(self, path: str) -> BinaryIO:
        zi = self._lookup(path)
        # Read the whole member so CRC and decompression errors surface here.
        try:
            data = self._zf.read(zi)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, OSError, ValueError) as e:
            raise ProviderError(f"Error reading {path} from {self._path}: {e}") from e
        return io.BufferedReader(io.BytesIO(data))

    def metadata(self, path: str) -> Metadata:
        return Metadata(length=self._lookup(path).file_size)

    def close(self) -> None:
        self._zf.close()
