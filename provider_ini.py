"""INI document provider — serve one key/value configuration file under a logical name.

A game install carries a handful of loose configuration documents (for
example fallout2.cfg) next to its archives. This provider makes exactly one
of them visible through the FileSystem. The file may be absent, in which case
the provider exists but has nothing to serve.
"""

import configparser
import io
import logging
import os
from typing import BinaryIO

from paths import normalize_path
from provider import Provider, Metadata, NotFoundError, ProviderError

log = logging.getLogger(__name__)


class IniProvider(Provider):
    """Expose a single configuration document as one file."""

    def __init__(self, path: str, name: str | None = None):
        self._path = path
        self._name = normalize_path(name if name is not None else os.path.basename(path))
        self._found = os.path.isfile(path)
        if self._found:
            log.debug("Found document %s as %r", path, self._name)
        else:
            log.info("Document %s is missing, %r will not resolve", path, self._name)

    def __repr__(self):
        state = "found" if self._found else "missing"
        return f"IniProvider({self._path!r}, name={self._name!r}, {state})"

    def _check(self, path: str) -> None:
        if not self._found or normalize_path(path) != self._name:
            raise NotFoundError(f"Not found: {path}")

    def reader(self, path: str) -> BinaryIO:
        self._check(path)
        log.debug("Loading document %s", self._path)
        try:
            return open(self._path, "rb")
        except FileNotFoundError as e:
            raise NotFoundError(f"Not found: {path}") from e
        except OSError as e:
            raise ProviderError(f"Cannot open {self._path}: {e}") from e

    def metadata(self, path: str) -> Metadata:
        self._check(path)
        try:
            return Metadata(length=os.stat(self._path).st_size)
        except FileNotFoundError as e:
            raise NotFoundError(f"Not found: {path}") from e
        except OSError as e:
            raise ProviderError(f"Cannot stat {self._path}: {e}") from e


def read_properties(fs, path: str, encoding: str = "utf-8") -> configparser.ConfigParser:
    """Read the document at path through fs and parse it as INI.

    Option names keep their case, duplicate keys are tolerated (last one
    wins) and both ";" and "#" start a comment.
    """
    config = configparser.ConfigParser(
        strict=False,
        interpolation=None,
        comment_prefixes=(";", "#"),
        inline_comment_prefixes=(";",),
    )
    config.optionxform = str

    with fs.reader(path) as f:
        data = f.read()
    try:
        config.read_file(io.StringIO(data.decode(encoding)), source=path)
    except (UnicodeDecodeError, configparser.Error) as e:
        raise ProviderError(f"Cannot parse {path}: {e}") from e
    return config
