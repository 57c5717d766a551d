"""Published corpus snapshot.

Readers call ``current()`` and keep the returned ``Corpus`` for as long as
they need it; a refresh never mutates a published snapshot, it only swaps
the reference. A failed or cancelled refresh leaves the previous snapshot
in place.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from daybook.content.errors import ContentError
from daybook.content.models import Corpus
from daybook.content.scanner import Reader, ScanSettings, read_bytes, scan_corpus

logger = logging.getLogger(__name__)


class CorpusStore:
    """Holds the authoritative ``Corpus`` and swaps it atomically on refresh."""

    def __init__(self, root: Path, settings: ScanSettings | None = None) -> None:
        self.root = root
        self.settings = settings or ScanSettings()
        self._corpus: Corpus | None = None
        self._generation = 0
        # Serialises writers only; readers never take this lock.
        self._refresh_lock = threading.Lock()

    @property
    def generation(self) -> int:
        """Number of snapshots published so far."""
        return self._generation

    def current(self) -> Corpus:
        """Return the published snapshot.

        Raises:
            LookupError: if nothing has been published yet.
        """
        corpus = self._corpus
        if corpus is None:
            raise LookupError("no corpus has been published yet; call refresh() first")
        return corpus

    def publish(self, corpus: Corpus) -> None:
        self._corpus = corpus
        self._generation += 1

    def refresh(
        self,
        *,
        reader: Reader = read_bytes,
        cancel: threading.Event | None = None,
    ) -> Corpus:
        """Rescan and publish a new snapshot.

        Raises:
            CorpusUnavailable: fatal scan failure; previous snapshot kept.
            ScanCancelled: *cancel* was set; previous snapshot kept.
        """
        with self._refresh_lock:
            try:
                corpus = scan_corpus(self.root, self.settings, reader=reader, cancel=cancel)
            except ContentError as exc:
                logger.debug("refresh of %s failed (%s); keeping generation %d", self.root, exc.kind, self._generation)
                raise
            self.publish(corpus)
            return corpus
