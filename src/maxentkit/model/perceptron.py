"""Perceptron model."""

from collections.abc import Sequence

import numpy as np

from maxentkit.model.base import AbstractModel, ModelType
from maxentkit.model.context import EvalParameters


def perceptron_eval(
    pids: Sequence[int],
    values: Sequence[float],
    sums: np.ndarray,
    params: EvalParameters,
    normalize: bool = True,
) -> np.ndarray:
    """
    Accumulate perceptron scores into ``sums``.

    With ``normalize`` the raw sums are scaled by ``max(1, max |sum|)``,
    exponentiated and normalized to probabilities.
    """
    for pid, value in zip(pids, values):
        ctx = params.parameters[pid]
        sums[ctx.outcomes] += ctx.parameters * value

    if normalize:
        max_prior = max(1.0, float(np.abs(sums).max(initial=0.0)))
        np.exp(sums / max_prior, out=sums)
        sums /= sums.sum()
    return sums


class PerceptronModel(AbstractModel):
    """Linear model trained by the (averaged) perceptron."""

    model_type = ModelType.PERCEPTRON

    def _score(self, pids: list[int], values: list[float], sums: np.ndarray) -> None:
        perceptron_eval(pids, values, sums, self.eval_params)
