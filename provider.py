"""Provider interface, error taxonomy and in-memory reference implementation."""

import io
from dataclasses import dataclass
from typing import BinaryIO

from paths import normalize_path


@dataclass(frozen=True)
class Metadata:
    """Size information about a resolved resource."""
    length: int

    def __post_init__(self):
        if self.length < 0:
            raise ValueError(f"Negative length: {self.length}")


class ProviderError(Exception):
    """Hard failure: the path belongs to a provider but cannot be served."""
    pass


class NotFoundError(ProviderError):
    """Path is not present in a provider."""
    pass


class ConfigError(ProviderError):
    """Resource configuration is invalid or unreadable."""
    pass


class Provider:
    """Abstract read-only backing store.

    Paths are passed exactly as the caller wrote them. Each provider
    canonicalizes them itself (see paths.normalize_path) if it needs to.

    Both operations raise NotFoundError when the path is simply absent and
    any other ProviderError when the path exists but cannot be served.
    """

    def reader(self, path: str) -> BinaryIO:
        """Open the resource for sequential reading."""
        raise NotImplementedError

    def metadata(self, path: str) -> Metadata:
        """Return size information without opening the resource."""
        raise NotImplementedError


class MemoryProvider(Provider):
    """In-memory provider backed by a flat dict of path -> content.

    Keys are canonicalized, so "Art/Intrface/IFACE.FRM" and
    "art\\intrface\\iface.frm" name the same entry. String values are
    encoded to UTF-8 bytes.

    Example:
        MemoryProvider({
            "color.pal": b"\\x00" * 768,
            "text/english/game/misc.msg": "{100}{}{Hello}",
        })
    """

    def __init__(self, files: dict):
        self._files: dict[str, bytes] = {}
        for name, data in files.items():
            if isinstance(data, str):
                data = data.encode("utf-8")
            self._files[normalize_path(name)] = data

    def _lookup(self, path: str) -> bytes:
        key = normalize_path(path)
        if key not in self._files:
            raise NotFoundError(f"Not found: {path}")
        return self._files[key]

    def reader(self, path: str) -> BinaryIO:
        return io.BufferedReader(io.BytesIO(self._lookup(path)))

    def metadata(self, path: str) -> Metadata:
        return Metadata(length=len(self._lookup(path)))
