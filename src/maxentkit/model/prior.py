"""Outcome priors for maxent scoring."""

import math
from collections.abc import Sequence

import numpy as np


class UniformPrior:
    """Uniform distribution over outcomes, in log space."""

    def __init__(self, outcome_labels: Sequence[str] = ()) -> None:
        self.set_labels(outcome_labels)

    def set_labels(self, outcome_labels: Sequence[str]) -> None:
        """Set the outcome vocabulary."""
        self.num_outcomes = len(outcome_labels)
        self._log_prior = math.log(1.0 / self.num_outcomes) if self.num_outcomes else 0.0

    def log_prior(self, dist: np.ndarray) -> np.ndarray:
        """Fill ``dist`` with the log prior and return it."""
        dist[: self.num_outcomes] = self._log_prior
        return dist
