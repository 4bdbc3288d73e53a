"""Directory provider — serve loose files from a directory on the host filesystem."""

import logging
import os
from typing import BinaryIO

from paths import normalize_path
from provider import Provider, Metadata, NotFoundError, ProviderError

log = logging.getLogger(__name__)


class DirProvider(Provider):
    """Expose the files under a base directory.

    Path components are matched case-insensitively against the directory
    entries, so "ART\\Intrface\\iface.frm" finds "art/intrface/IFACE.FRM"
    on a case-sensitive host. A base directory that does not exist is not
    an error; every lookup is then NotFound.
    """

    def __init__(self, base: str):
        self._base = os.path.abspath(base)
        if not os.path.isdir(self._base):
            log.info("Directory %s does not exist, provider will be empty", self._base)

    def __repr__(self):
        return f"DirProvider({self._base!r})"

    def _find_entry(self, parent: str, name: str) -> str:
        """Return the host name of the entry in parent matching name, ignoring case."""
        if os.path.lexists(os.path.join(parent, name)):
            return name
        try:
            entries = os.listdir(parent)
        except FileNotFoundError as e:
            raise NotFoundError(f"Not found: {parent}") from e
        except NotADirectoryError as e:
            raise NotFoundError(f"Not a directory: {parent}") from e
        except OSError as e:
            raise ProviderError(f"Cannot list {parent}: {e}") from e
        for entry in entries:
            if normalize_path(entry) == name:
                return entry
        raise NotFoundError(f"Not found: {os.path.join(parent, name)}")

    def _resolve(self, path: str) -> str:
        """Map a logical path to an existing host file path."""
        parts = [p for p in normalize_path(path).split("\\") if p]
        if not parts or ".." in parts:
            raise NotFoundError(f"Not found: {path}")

        host = self._base
        for part in parts:
            host = os.path.join(host, self._find_entry(host, part))
        if os.path.isdir(host):
            raise NotFoundError(f"Not a file: {path}")
        return host

    def reader(self, path: str) -> BinaryIO:
        host = self._resolve(path)
        try:
            return open(host, "rb")
        except FileNotFoundError as e:
            raise NotFoundError(f"Not found: {path}") from e
        except OSError as e:
            raise ProviderError(f"Cannot open {host}: {e}") from e

    def metadata(self, path: str) -> Metadata:
        host = self._resolve(path)
        try:
            return Metadata(length=os.stat(host).st_size)
        except FileNotFoundError as e:
            raise NotFoundError(f"Not found: {path}") from e
        except OSError as e:
            raise ProviderError(f"Cannot stat {host}: {e}") from e
