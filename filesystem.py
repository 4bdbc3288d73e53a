"""Unified read-only namespace over an ordered list of providers."""

import logging
from typing import BinaryIO, Callable, TypeVar

from provider import Metadata, NotFoundError, Provider, ProviderError

log = logging.getLogger(__name__)

T = TypeVar("T")


class FileSystem:
    """Resolve paths against providers in registration order.

    The first provider that has a path answers for it. A provider raising
    NotFoundError is skipped. Any other ProviderError stops the search and
    is raised as is: lower-priority providers never get to serve a path
    that a higher-priority provider failed on.
    """

    def __init__(self):
        self._providers: list[Provider] = []

    def register_provider(self, provider: Provider) -> None:
        """Append provider with the lowest priority so far."""
        self._providers.append(provider)
        log.debug("Registered provider #%d: %r", len(self._providers) - 1, provider)

    def reader(self, path: str) -> BinaryIO:
        """Open path for reading from the first provider that has it."""
        return self._find_provider(path, lambda p: p.reader(path))

    def metadata(self, path: str) -> Metadata:
        """Return metadata for path from the first provider that has it."""
        return self._find_provider(path, lambda p: p.metadata(path))

    def exists(self, path: str) -> bool:
        """Return True if metadata(path) succeeds.

        This is a full lookup, not a cheap check, and a hard failure in any
        provider makes the path not exist.
        """
        try:
            self.metadata(path)
        except ProviderError:
            return False
        return True

    def _find_provider(self, path: str, op: Callable[[Provider], T]) -> T:
        error: ProviderError | None = None
        for i, provider in enumerate(self._providers):
            try:
                result = op(provider)
            except NotFoundError:
                continue
            except ProviderError as e:
                if error is None:
                    error = e
                log.debug("Provider #%d failed on %r, aborting lookup: %s", i, path, e)
                break
            log.debug("Resolved %r from provider #%d", path, i)
            return result

        if error is not None:
            raise error
        raise NotFoundError(f"File not found: {path}")
