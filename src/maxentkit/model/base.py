"""
Model scoring API shared by all maxent-style models.
"""

from abc import ABC, abstractmethod
from collections.abc import MutableSequence, Sequence
from enum import Enum
from typing import ClassVar

import numpy as np

from maxentkit.model.context import Context, EvalParameters
from maxentkit.model.hashtable import NOT_FOUND, IndexHashTable

PREDICATE_LOAD_FACTOR = 0.7


class ModelType(str, Enum):
    """Kind of model, determining its scoring function and persisted tag."""

    MAXENT = "Maxent"
    PERCEPTRON = "Perceptron"
    MAXENT_QN = "MaxentQn"


class AbstractModel(ABC):
    """
    Immutable trained model.

    Holds one Context per predicate, a predicate-name lookup table and the
    outcome names. Subclasses supply the scoring function.
    """

    model_type: ClassVar[ModelType]

    def __init__(
        self,
        parameters: Sequence[Context],
        pred_labels: Sequence[str],
        outcome_names: Sequence[str],
        correction_constant: float = 1.0,
        correction_param: float = 0.0,
    ) -> None:
        if len(parameters) != len(pred_labels):
            msg = (
                f"Got {len(parameters)} parameter contexts for "
                f"{len(pred_labels)} predicates"
            )
            raise ValueError(msg)
        frozen = tuple(Context(c.outcomes, c.parameters) for c in parameters)
        self.pmap = IndexHashTable(list(pred_labels), PREDICATE_LOAD_FACTOR)
        self.outcome_names: tuple[str, ...] = tuple(outcome_names)
        self.eval_params = EvalParameters(
            parameters=frozen,
            num_outcomes=len(self.outcome_names),
            correction_constant=correction_constant,
            correction_param=correction_param,
        )

    @abstractmethod
    def _score(self, pids: list[int], values: list[float], sums: np.ndarray) -> None:
        """Write normalized outcome probabilities into ``sums``."""
        ...

    def eval(
        self,
        context: Sequence[str],
        values: Sequence[float] | None = None,
        outsums: MutableSequence[float] | np.ndarray | None = None,
    ) -> list[float] | MutableSequence[float] | np.ndarray:
        """
        Score a context.

        Args:
            context: Predicate names. Names the model does not know are
                skipped.
            values: Optional real values parallel to ``context``.
            outsums: Optional buffer of length ``num_outcomes``; it is
                overwritten with the result and returned.

        Returns:
            Probability per outcome id, summing to 1.
        """
        if values is not None and len(values) != len(context):
            msg = f"Got {len(values)} values for {len(context)} predicates"
            raise ValueError(msg)

        pids: list[int] = []
        vals: list[float] = []
        for i, pred in enumerate(context):
            pid = self.pmap.lookup(pred)
            if pid != NOT_FOUND:
                pids.append(pid)
                vals.append(1.0 if values is None else float(values[i]))

        sums = np.zeros(self.num_outcomes, dtype=np.float64)
        self._score(pids, vals, sums)

        if outsums is None:
            return sums.tolist()
        if len(outsums) != self.num_outcomes:
            msg = f"outsums has length {len(outsums)}, expected {self.num_outcomes}"
            raise ValueError(msg)
        outsums[:] = sums if isinstance(outsums, np.ndarray) else sums.tolist()
        return outsums

    @property
    def num_outcomes(self) -> int:
        return len(self.outcome_names)

    def get_outcome(self, index: int) -> str:
        """Outcome name for an outcome id."""
        return self.outcome_names[index]

    def get_index(self, outcome: str) -> int:
        """Outcome id for a name, or -1 when unknown."""
        try:
            return self.outcome_names.index(outcome)
        except ValueError:
            return NOT_FOUND

    def get_best_outcome(self, probs: Sequence[float]) -> str:
        """Name of the most probable outcome (first one on ties)."""
        return self.outcome_names[int(np.argmax(probs))]

    def get_all_outcomes(self, probs: Sequence[float]) -> str:
        """Render every outcome with its probability, e.g. ``A[0.4000] B[0.6000]``."""
        if len(probs) != self.num_outcomes:
            msg = f"Got {len(probs)} probabilities for {self.num_outcomes} outcomes"
            raise ValueError(msg)
        return " ".join(
            f"{name}[{p:.4f}]" for name, p in zip(self.outcome_names, probs)
        )

    def contains_outcome(self, outcome: str) -> bool:
        return outcome in self.outcome_names

    def contains_outcomes(self, outcomes: Sequence[str]) -> bool:
        """Whether every name in ``outcomes`` is a known outcome."""
        return all(o in self.outcome_names for o in outcomes)

    @property
    def pred_labels(self) -> list[str]:
        """Predicate names ordered by predicate id."""
        return self.pmap.to_list()

    def get_data_structures(
        self,
    ) -> tuple[tuple[Context, ...], IndexHashTable, tuple[str, ...], float, float]:
        """
        Internals needed to persist the model.

        Returns:
            Parameters, predicate table, outcome names, correction constant
            and correction parameter.
        """
        return (
            self.eval_params.parameters,
            self.pmap,
            self.outcome_names,
            self.eval_params.correction_constant,
            self.eval_params.correction_param,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbstractModel):
            return NotImplemented
        return (
            self.model_type == other.model_type
            and self.outcome_names == other.outcome_names
            and self.pred_labels == other.pred_labels
            and self.eval_params == other.eval_params
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(n_outcomes={self.num_outcomes}, "
            f"n_predicates={len(self.pmap)})"
        )
