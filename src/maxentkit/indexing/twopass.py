"""
Two-pass indexer.

The first pass counts predicates while spilling events to a temporary
JSON-lines file; the second pass re-reads the spill file and encodes each
event with the final ids. Memory use stays bounded by the vocabulary.
"""

import json
import os
import tempfile
from collections.abc import Iterable, Iterator
from pathlib import Path

from maxentkit.events.event import Event
from maxentkit.indexing.base import DataIndexer
from maxentkit.utils.logging import get_logger

log = get_logger(__name__)


class TwoPassDataIndexer(DataIndexer):
    """Indexer spilling events to disk between the counting and encoding passes."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._spill_path: Path | None = None

    def _store(self, events: Iterable[Event]) -> None:
        fd, name = tempfile.mkstemp(prefix="maxentkit-events-", suffix=".jsonl")
        self._spill_path = Path(name)
        n_events = 0
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            for event in events:
                record = {
                    "o": event.outcome,
                    "c": list(event.context),
                    "v": list(event.values) if event.values is not None else None,
                }
                f.write(json.dumps(record) + "\n")
                n_events += 1
        log.debug("Spilled events", path=name, n_events=n_events)

    def _stored(self) -> Iterator[Event]:
        assert self._spill_path is not None
        with self._spill_path.open(encoding="utf-8") as f:
            for line in f:
                record = json.loads(line)
                yield Event(record["o"], record["c"], record["v"])

    def _cleanup(self) -> None:
        if self._spill_path is not None:
            self._spill_path.unlink(missing_ok=True)
            self._spill_path = None
