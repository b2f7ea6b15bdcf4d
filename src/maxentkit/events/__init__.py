"""
Training events and event streams.
"""

from maxentkit.events.event import Event
from maxentkit.events.streams import (
    EventStream,
    FileEventStream,
    HashSumEventStream,
    ListEventStream,
    RealBasicEventStream,
    RealValueFileEventStream,
    parse_contexts,
)

__all__ = [
    "Event",
    "EventStream",
    "FileEventStream",
    "HashSumEventStream",
    "ListEventStream",
    "RealBasicEventStream",
    "RealValueFileEventStream",
    "parse_contexts",
]
