"""
Per-predicate parameter storage.

A Context holds, for one predicate, the ids of the outcomes it has weights
for and the weights themselves. Only MutableContext may change its weights,
and only trainers use it.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np


class Context:
    """Read-only weights of one predicate."""

    def __init__(self, outcomes: Sequence[int], parameters: Sequence[float]) -> None:
        if len(outcomes) != len(parameters):
            msg = (
                f"Context has {len(outcomes)} outcomes but "
                f"{len(parameters)} parameters"
            )
            raise ValueError(msg)
        self._outcomes = np.array(outcomes, dtype=np.int64)
        self._parameters = np.array(parameters, dtype=np.float64)
        self._freeze()

    def _freeze(self) -> None:
        self._outcomes.setflags(write=False)
        self._parameters.setflags(write=False)

    @property
    def outcomes(self) -> np.ndarray:
        """Active outcome ids."""
        return self._outcomes

    @property
    def parameters(self) -> np.ndarray:
        """Weights parallel to ``outcomes``."""
        return self._parameters

    def __len__(self) -> int:
        return len(self._outcomes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Context):
            return NotImplemented
        return np.array_equal(self._outcomes, other._outcomes) and np.array_equal(
            self._parameters, other._parameters
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(outcomes={self._outcomes.tolist()}, "
            f"parameters={self._parameters.tolist()})"
        )


class MutableContext(Context):
    """Context whose weights may be updated during training."""

    def _freeze(self) -> None:
        self._outcomes.setflags(write=False)

    def set_parameter(self, outcome_index: int, value: float) -> None:
        """Set the weight at ``outcome_index`` (a position in ``outcomes``)."""
        self._parameters[outcome_index] = value

    def update_parameter(self, outcome_index: int, delta: float) -> None:
        """Add ``delta`` to the weight at ``outcome_index``."""
        self._parameters[outcome_index] += delta

    def contains(self, outcome: int) -> bool:
        """Whether ``outcome`` is active for this predicate."""
        return bool(np.any(self._outcomes == outcome))

    def freeze(self) -> Context:
        """Immutable copy."""
        return Context(self._outcomes, self._parameters)


@dataclass(frozen=True)
class EvalParameters:
    """
    Everything needed to score a context.

    Attributes:
        parameters: One Context per predicate id.
        num_outcomes: Size of the outcome vocabulary.
        correction_constant: GIS correction constant ``C``.
        correction_param: GIS correction feature weight.
    """

    parameters: tuple[Context, ...]
    num_outcomes: int
    correction_constant: float = 1.0
    correction_param: float = 0.0

    @property
    def constant_inverse(self) -> float:
        return 1.0 / self.correction_constant
