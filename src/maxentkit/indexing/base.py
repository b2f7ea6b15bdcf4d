"""
Data indexing: from an event stream to a compact numeric corpus.

Indexers count predicate occurrences, drop predicates below the cutoff,
assign dense ids and merge identical rows.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from maxentkit.events.event import Event
from maxentkit.monitor import Monitor
from maxentkit.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class IndexedCorpus:
    """
    Parallel arrays describing an indexed training corpus.

    Attributes:
        contexts: Sorted predicate ids of each row.
        outcomes: Outcome id of each row.
        values: Real values parallel to ``contexts``, or None when no
            event carried real values.
        num_times_seen: How many merged events each row stands for.
        pred_labels: Predicate name per predicate id.
        outcome_labels: Outcome name per outcome id.
        pred_counts: Corpus-wide occurrence count per predicate id.
    """

    contexts: list[list[int]]
    outcomes: list[int]
    values: list[list[float]] | None
    num_times_seen: list[int]
    pred_labels: list[str]
    outcome_labels: list[str]
    pred_counts: list[int]

    @property
    def num_events(self) -> int:
        """Number of retained events (sum of ``num_times_seen``)."""
        return sum(self.num_times_seen)

    @property
    def num_rows(self) -> int:
        """Number of distinct rows after merging."""
        return len(self.outcomes)

    @property
    def num_predicates(self) -> int:
        return len(self.pred_labels)

    @property
    def num_outcomes(self) -> int:
        return len(self.outcome_labels)

    def row_value(self, row: int, j: int) -> float:
        """Value of the j-th predicate in ``row``."""
        return 1.0 if self.values is None else self.values[row][j]


class DataIndexer(ABC):
    """
    Abstract base class for indexers.

    Subclasses decide where events live between the counting pass and the
    encoding pass. ``execute`` may run only once per indexer.
    """

    def __init__(
        self,
        events: Iterable[Event],
        cutoff: int = 0,
        sort: bool = True,
        monitor: Monitor | None = None,
    ) -> None:
        """
        Initialize indexer.

        Args:
            events: Event source.
            cutoff: Minimum corpus-wide occurrence count for a predicate to
                be kept.
            sort: Emit rows in sorted order instead of first-seen order.
            monitor: Optional monitor polled for cancellation.
        """
        if cutoff < 0:
            raise ValueError(f"cutoff must be >= 0, got {cutoff}")
        self.events = events
        self.cutoff = cutoff
        self.sort = sort
        self.monitor = monitor
        self._executed = False

    @abstractmethod
    def _store(self, events: Iterable[Event]) -> None:
        """Keep events for the encoding pass. Implemented by subclasses."""
        ...

    @abstractmethod
    def _stored(self) -> Iterator[Event]:
        """Replay the stored events. Implemented by subclasses."""
        ...

    def _cleanup(self) -> None:
        """Release storage used between passes."""

    def _checkpoint(self) -> None:
        if self.monitor is not None:
            self.monitor.check_cancelled()

    def _counting(self, counts: dict[str, int]) -> Iterator[Event]:
        for event in self.events:
            self._checkpoint()
            for pred in event.context:
                counts[pred] = counts.get(pred, 0) + 1
            yield event

    def execute(self) -> IndexedCorpus:
        """
        Index the events.

        Returns:
            The indexed corpus.

        Raises:
            RuntimeError: If the indexer was already executed.
            TrainingCancelledError: If the monitor requested cancellation.
        """
        if self._executed:
            raise RuntimeError(
                f"{self.__class__.__name__} has already been executed. "
                "Create a new indexer for another corpus."
            )
        self._executed = True

        try:
            counts: dict[str, int] = {}
            self._store(self._counting(counts))
            log.info(
                "Counted predicates",
                indexer=self.__class__.__name__,
                n_predicates=len(counts),
                cutoff=self.cutoff,
            )
            corpus = self._encode(counts)
        finally:
            self._cleanup()

        log.info(
            "Indexed events",
            n_events=corpus.num_events,
            n_rows=corpus.num_rows,
            n_predicates=corpus.num_predicates,
            n_outcomes=corpus.num_outcomes,
        )
        return corpus

    def _encode(self, counts: dict[str, int]) -> IndexedCorpus:
        pred_index: dict[str, int] = {}
        pred_counts: list[int] = []
        for pred, count in counts.items():
            if count >= self.cutoff:
                pred_index[pred] = len(pred_counts)
                pred_counts.append(count)

        outcome_index: dict[str, int] = {}
        rows: dict[tuple, int] = {}
        keys: list[tuple] = []
        seen: list[int] = []
        has_values = False
        dropped = 0

        for event in self._stored():
            self._checkpoint()
            pairs = [
                (pred_index[pred], event.value(i))
                for i, pred in enumerate(event.context)
                if pred in pred_index
            ]
            if not pairs:
                dropped += 1
                self._warn_dropped(event)
                continue
            pairs.sort()
            if event.values is not None:
                has_values = True
            oid = outcome_index.setdefault(event.outcome, len(outcome_index))
            key = (
                oid,
                tuple(p for p, _ in pairs),
                tuple(v for _, v in pairs),
            )
            row = rows.get(key)
            if row is None:
                rows[key] = len(keys)
                keys.append(key)
                seen.append(1)
            else:
                seen[row] += 1

        order = list(range(len(keys)))
        if self.sort:
            order.sort(key=lambda r: keys[r])

        if dropped:
            log.warning("Dropped events with empty context", n_dropped=dropped)

        return IndexedCorpus(
            contexts=[list(keys[r][1]) for r in order],
            outcomes=[keys[r][0] for r in order],
            values=[list(keys[r][2]) for r in order] if has_values else None,
            num_times_seen=[seen[r] for r in order],
            pred_labels=list(pred_index),
            outcome_labels=list(outcome_index),
            pred_counts=pred_counts,
        )

    def _warn_dropped(self, event: Event) -> None:
        text = f"Dropped event {event}: no predicate survived the cutoff"
        if self.monitor is not None:
            self.monitor.warning(text)
        else:
            log.debug("Dropped event", dropped_event=str(event))
