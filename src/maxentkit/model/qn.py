"""Maxent model trained by quasi-Newton optimization."""

from collections.abc import Sequence

import numpy as np

from maxentkit.model.base import AbstractModel, ModelType
from maxentkit.model.context import EvalParameters


def qn_eval(
    pids: Sequence[int],
    values: Sequence[float],
    sums: np.ndarray,
    params: EvalParameters,
) -> np.ndarray:
    """Softmax of the summed weights, written into ``sums``."""
    for pid, value in zip(pids, values):
        ctx = params.parameters[pid]
        sums[ctx.outcomes] += ctx.parameters * value
    np.exp(sums - sums.max(), out=sums)
    sums /= sums.sum()
    return sums


class QNModel(AbstractModel):
    """Maximum entropy model fitted with L-BFGS."""

    model_type = ModelType.MAXENT_QN

    def _score(self, pids: list[int], values: list[float], sums: np.ndarray) -> None:
        qn_eval(pids, values, sums, self.eval_params)
