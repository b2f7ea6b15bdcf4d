"""GIS maxent model."""

from collections.abc import Sequence

import numpy as np

from maxentkit.model.base import AbstractModel, ModelType
from maxentkit.model.context import Context, EvalParameters
from maxentkit.model.prior import UniformPrior


def gis_eval(
    pids: Sequence[int],
    values: Sequence[float],
    prior: np.ndarray,
    params: EvalParameters,
) -> np.ndarray:
    """
    Score a context with GIS parameters.

    Args:
        pids: Predicate ids of the context.
        values: Values parallel to ``pids``.
        prior: Log prior per outcome; overwritten with the probabilities.
        params: Model parameters.

    Returns:
        ``prior``, normalized to a probability distribution.
    """
    numfeats = np.zeros(params.num_outcomes, dtype=np.float64)
    for pid, value in zip(pids, values):
        ctx = params.parameters[pid]
        prior[ctx.outcomes] += ctx.parameters * value
        numfeats[ctx.outcomes] += 1

    exponent = prior * params.constant_inverse
    if params.correction_param != 0.0:
        exponent += (
            1.0 - numfeats / params.correction_constant
        ) * params.correction_param
    np.exp(exponent - exponent.max(), out=prior)
    prior /= prior.sum()
    return prior


class GISModel(AbstractModel):
    """Maximum entropy model trained by generalized iterative scaling."""

    model_type = ModelType.MAXENT

    def __init__(
        self,
        parameters: Sequence[Context],
        pred_labels: Sequence[str],
        outcome_names: Sequence[str],
        correction_constant: float = 1.0,
        correction_param: float = 0.0,
        prior: UniformPrior | None = None,
    ) -> None:
        super().__init__(
            parameters, pred_labels, outcome_names, correction_constant, correction_param
        )
        self.prior = prior if prior is not None else UniformPrior(self.outcome_names)

    def _score(self, pids: list[int], values: list[float], sums: np.ndarray) -> None:
        self.prior.log_prior(sums)
        gis_eval(pids, values, sums, self.eval_params)
