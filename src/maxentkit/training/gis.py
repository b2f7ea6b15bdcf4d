"""
Generalized iterative scaling (GIS) trainer.

Each round computes the model expectation of every active
(predicate, outcome) feature under the current weights and moves the weight
by ``(log observed - log expected) / C``, where ``C`` is the largest total
feature mass of any event. Optional smoothing:

- simple smoothing: every outcome is active for every predicate and unseen
  pairs get a small pseudo observation;
- Gaussian smoothing: the update is solved with Newton's method under a
  Gaussian prior on the weights.
"""

import math

import numpy as np

from maxentkit.errors import InvalidInputError
from maxentkit.indexing.base import IndexedCorpus
from maxentkit.model.context import EvalParameters, MutableContext
from maxentkit.model.gis import GISModel, gis_eval
from maxentkit.model.prior import UniformPrior
from maxentkit.training.base import AbstractEventTrainer
from maxentkit.utils.logging import get_logger

log = get_logger(__name__)

NEWTON_MAX_ITERATIONS = 50
NEWTON_TOLERANCE = 1e-6
MIN_PROBABILITY = np.finfo(np.float64).tiny


class GISTrainer(AbstractEventTrainer):
    """Trainer for GIS maxent models."""

    ALGORITHM_NAMES = ("MAXENT", "GIS")

    def _do_train(self, corpus: IndexedCorpus) -> GISModel:
        settings = self._check_is_initialized()
        num_outcomes = corpus.num_outcomes

        if settings.correction_constant is not None:
            correction_constant = settings.correction_constant
        else:
            correction_constant = _max_feature_mass(corpus)
        if correction_constant <= 0.0:
            raise InvalidInputError("All events have zero feature mass")
        log.info("Computed correction constant", correction_constant=correction_constant)

        observed_counts = _observed_counts(corpus)
        all_outcomes = list(range(num_outcomes))

        params: list[MutableContext] = []
        observed: list[np.ndarray] = []
        for counts in observed_counts:
            if settings.smoothing:
                active = all_outcomes
                obs = [
                    counts.get(o, 0.0) or settings.smoothing_observation
                    for o in active
                ]
            else:
                active = sorted(o for o, c in counts.items() if c > 0)
                obs = [counts[o] for o in active]
            params.append(MutableContext(active, [0.0] * len(active)))
            observed.append(np.array(obs, dtype=np.float64))

        eval_params = EvalParameters(parameters=tuple(params), num_outcomes=num_outcomes)
        prior = UniformPrior(corpus.outcome_labels)

        for iteration in range(1, settings.iterations + 1):
            if self._cancelled():
                log.warning("Training cancelled", completed_iterations=iteration - 1)
                break
            loglikelihood, accuracy = self._next_iteration(
                corpus, params, observed, eval_params, prior, correction_constant
            )
            log.info(
                "GIS iteration",
                iteration=iteration,
                loglikelihood=loglikelihood,
                accuracy=accuracy,
            )
            self._display(
                f"{iteration}: loglikelihood={loglikelihood} accuracy={accuracy}"
            )

        return GISModel(
            [p.freeze() for p in params],
            corpus.pred_labels,
            corpus.outcome_labels,
            correction_constant=1.0,
            correction_param=0.0,
            prior=prior,
        )

    def _next_iteration(
        self,
        corpus: IndexedCorpus,
        params: list[MutableContext],
        observed: list[np.ndarray],
        eval_params: EvalParameters,
        prior: UniformPrior,
        correction_constant: float,
    ) -> tuple[float, float]:
        """Run one GIS round and return (log-likelihood, training accuracy)."""
        settings = self._check_is_initialized()
        model_expects = [np.zeros(len(p), dtype=np.float64) for p in params]
        loglikelihood = 0.0
        num_correct = 0
        dist = np.zeros(corpus.num_outcomes, dtype=np.float64)

        for row, context in enumerate(corpus.contexts):
            values = [corpus.row_value(row, j) for j in range(len(context))]
            prior.log_prior(dist)
            gis_eval(context, values, dist, eval_params)

            times_seen = corpus.num_times_seen[row]
            for pid, value in zip(context, values):
                model_expects[pid] += dist[params[pid].outcomes] * (value * times_seen)

            outcome = corpus.outcomes[row]
            loglikelihood += math.log(max(dist[outcome], MIN_PROBABILITY)) * times_seen
            if int(np.argmax(dist)) == outcome:
                num_correct += times_seen

        n_zero = 0
        for pid, ctx in enumerate(params):
            expected = model_expects[pid]
            for aoi in range(len(ctx)):
                if settings.gaussian_smoothing:
                    ctx.update_parameter(
                        aoi,
                        _gaussian_update(
                            ctx.parameters[aoi],
                            expected[aoi],
                            observed[pid][aoi],
                            correction_constant,
                            settings.sigma,
                        ),
                    )
                elif expected[aoi] == 0.0:
                    n_zero += 1
                else:
                    ctx.update_parameter(
                        aoi,
                        (math.log(observed[pid][aoi]) - math.log(expected[aoi]))
                        / correction_constant,
                    )
        if n_zero:
            log.warning("Model expectation is zero, skipping update", n_features=n_zero)

        return loglikelihood, num_correct / corpus.num_events


def _max_feature_mass(corpus: IndexedCorpus) -> float:
    """Largest number of active features (or summed values) of any row."""
    if corpus.values is None:
        return float(max(len(c) for c in corpus.contexts))
    return max(sum(v) for v in corpus.values)


def _observed_counts(corpus: IndexedCorpus) -> list[dict[int, float]]:
    """Empirical feature counts, per predicate and outcome."""
    counts: list[dict[int, float]] = [{} for _ in range(corpus.num_predicates)]
    for row, context in enumerate(corpus.contexts):
        outcome = corpus.outcomes[row]
        times_seen = corpus.num_times_seen[row]
        for j, pid in enumerate(context):
            value = corpus.row_value(row, j)
            counts[pid][outcome] = counts[pid].get(outcome, 0.0) + value * times_seen
    return counts


def _gaussian_update(
    param: float,
    model_value: float,
    observed_value: float,
    correction_constant: float,
    sigma: float,
) -> float:
    """Solve the Gaussian-prior GIS update for one feature with Newton's method."""
    x0 = 0.0
    for _ in range(NEWTON_MAX_ITERATIONS):
        tmp = model_value * math.exp(correction_constant * x0)
        f = tmp + (param + x0) / sigma - observed_value
        fp = tmp * correction_constant + 1.0 / sigma
        if fp == 0.0:
            break
        x = x0 - f / fp
        if abs(x - x0) < NEWTON_TOLERANCE:
            x0 = x
            break
        x0 = x
    return x0
