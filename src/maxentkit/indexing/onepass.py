"""One-pass indexer keeping events in memory between passes."""

from collections.abc import Iterable, Iterator

from maxentkit.events.event import Event
from maxentkit.indexing.base import DataIndexer


class OnePassDataIndexer(DataIndexer):
    """Indexer for corpora that fit in memory."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._events: list[Event] = []

    def _store(self, events: Iterable[Event]) -> None:
        self._events = list(events)

    def _stored(self) -> Iterator[Event]:
        yield from self._events

    def _cleanup(self) -> None:
        self._events = []
