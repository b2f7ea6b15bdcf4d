"""
Event streams.

An event stream is a re-iterable source of events. Every call to
``iter()`` starts over from the beginning of the underlying data where the
source allows it (files are re-opened, lists re-walked).
"""

import hashlib
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import IO

from maxentkit.events.event import Event
from maxentkit.utils.logging import get_logger

log = get_logger(__name__)


class EventStream(ABC):
    """Abstract base class for event sources."""

    @abstractmethod
    def _iter_events(self) -> Iterator[Event]:
        """Yield events from the source. Implemented by subclasses."""
        ...

    def __iter__(self) -> Iterator[Event]:
        return self._iter_events()

    def close(self) -> None:
        """Release resources held by the stream."""

    def __enter__(self) -> "EventStream":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ListEventStream(EventStream):
    """Stream over an in-memory sequence of events."""

    def __init__(self, events: Iterable[Event]) -> None:
        self.events: list[Event] = list(events)

    def _iter_events(self) -> Iterator[Event]:
        yield from self.events

    def __len__(self) -> int:
        return len(self.events)


class _LineEventStream(EventStream):
    """Base for streams reading one event per non-blank line."""

    def __init__(self, source: Path | str | IO[str]) -> None:
        if isinstance(source, (str, Path)):
            self.path: Path | None = Path(source)
            self._handle: IO[str] | None = None
        else:
            self.path = None
            self._handle = source

    def _lines(self) -> Iterator[str]:
        if self.path is None:
            assert self._handle is not None
            yield from self._handle
            return
        with self.path.open(encoding="utf-8") as f:
            yield from f

    @abstractmethod
    def _parse_line(self, line: str) -> Event:
        ...

    def _iter_events(self) -> Iterator[Event]:
        for line in self._lines():
            if line.strip():
                yield self._parse_line(line)

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()


class FileEventStream(_LineEventStream):
    """
    Events stored one per line as ``outcome pred1 pred2 ...``.

    Tokens are separated by whitespace.
    """

    def _parse_line(self, line: str) -> Event:
        tokens = line.split()
        return Event(tokens[0], tokens[1:])

    @staticmethod
    def to_line(event: Event) -> str:
        """
        Render an event in the format read by this stream.

        Args:
            event: Event to render.

        Returns:
            Line terminated by a newline.
        """
        parts = [event.outcome]
        if event.values is None:
            parts.extend(event.context)
        else:
            parts.extend(f"{p}={v}" for p, v in zip(event.context, event.values))
        return " ".join(parts) + "\n"


def parse_contexts(tokens: Sequence[str]) -> tuple[list[str], list[float] | None]:
    """
    Split ``pred=value`` tokens into predicate names and values.

    Tokens without ``=`` get the value 1.0. A value that does not parse as a
    float also falls back to 1.0 with a warning.

    Args:
        tokens: Context tokens.

    Returns:
        Predicate names and values; values are ``None`` when no token
        carried a real value.

    Raises:
        ValueError: If a value is negative.
    """
    contexts: list[str] = []
    values: list[float] = []
    has_real_value = False
    for token in tokens:
        split = token.rfind("=")
        if split <= 0 or split == len(token) - 1:
            contexts.append(token)
            values.append(1.0)
            continue
        name, raw = token[:split], token[split + 1 :]
        try:
            value = float(raw)
        except ValueError:
            log.warning("Unparsable context value, using 1.0", token=token)
            contexts.append(name)
            values.append(1.0)
            continue
        if value < 0:
            msg = f"Negative values are not allowed: {token!r}"
            raise ValueError(msg)
        has_real_value = True
        contexts.append(name)
        values.append(value)
    return contexts, values if has_real_value else None


class RealValueFileEventStream(FileEventStream):
    """Events stored one per line as ``outcome pred1=1.5 pred2 ...``."""

    def _parse_line(self, line: str) -> Event:
        tokens = line.split()
        contexts, values = parse_contexts(tokens[1:])
        return Event(tokens[0], contexts, values)


class RealBasicEventStream(EventStream):
    """
    Events given as ``pred1=1.5 pred2 ... outcome`` lines.

    The outcome is the last token on the line.
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self.lines = lines

    def _iter_events(self) -> Iterator[Event]:
        for line in self.lines:
            tokens = line.split()
            if not tokens:
                continue
            contexts, values = parse_contexts(tokens[:-1])
            yield Event(tokens[-1], contexts, values)


class HashSumEventStream(EventStream):
    """
    Pass-through stream computing an MD5 digest of the consumed events.

    Each new iteration restarts the digest.
    """

    def __init__(self, stream: Iterable[Event]) -> None:
        self.stream = stream
        self._digest = hashlib.md5()
        self._consumed = False

    def _iter_events(self) -> Iterator[Event]:
        self._digest = hashlib.md5()
        self._consumed = False
        for event in self.stream:
            self._digest.update(str(event).encode("utf-8", "surrogatepass"))
            yield event
        self._consumed = True

    def calculate_hash_sum(self) -> str:
        """
        Digest of all events seen by the last complete iteration.

        Raises:
            RuntimeError: If the stream has not been fully consumed.
        """
        if not self._consumed:
            raise RuntimeError(
                "HashSumEventStream has not been fully consumed. "
                "Iterate over all events before calculate_hash_sum()."
            )
        return self._digest.hexdigest()

    def close(self) -> None:
        if isinstance(self.stream, EventStream):
            self.stream.close()
