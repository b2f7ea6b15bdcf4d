"""
Training event: one labeled example.
"""

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, init=False)
class Event:
    """
    A single training example.

    Attributes:
        outcome: Label observed for this context.
        context: Ordered predicate names active in the example.
        values: Optional real values parallel to ``context``. ``None``
            means every predicate has weight 1.0.
    """

    outcome: str
    context: tuple[str, ...]
    values: tuple[float, ...] | None = None

    def __init__(
        self,
        outcome: str,
        context: Iterable[str],
        values: Iterable[float] | None = None,
    ) -> None:
        object.__setattr__(self, "outcome", outcome)
        object.__setattr__(self, "context", tuple(context))
        object.__setattr__(
            self, "values", tuple(float(v) for v in values) if values is not None else None
        )
        self.__post_init__()

    def __post_init__(self) -> None:
        if self.outcome is None:
            raise ValueError("Event outcome must not be None")
        if self.values is not None and len(self.values) != len(self.context):
            msg = (
                f"Event has {len(self.context)} predicates but "
                f"{len(self.values)} values"
            )
            raise ValueError(msg)

    def value(self, i: int) -> float:
        """Weight of the i-th predicate."""
        return 1.0 if self.values is None else self.values[i]

    def __str__(self) -> str:
        if self.values is None:
            parts = self.context
        else:
            parts = tuple(f"{p}={v}" for p, v in zip(self.context, self.values))
        return f"{self.outcome} [{' '.join(parts)}]"
