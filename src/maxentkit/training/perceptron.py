"""
Perceptron trainer.

Error-driven training: every event (repeated as often as it was seen) is
scored with the current weights, and on a mistake the weights of its
predicates move towards the correct outcome and away from the predicted one.

Options:

- ``UseAverage`` returns the average of the weights after each iteration;
- ``UseSkippedAveraging`` only averages iterations below 20 and perfect
  squares;
- ``Tolerance`` stops once training accuracy differs from each of the
  previous three iterations by less than the tolerance;
- ``StepSizeDecrease`` shrinks the step size by that fraction per iteration.
"""

import math

import numpy as np

from maxentkit.indexing.base import IndexedCorpus
from maxentkit.model.context import Context
from maxentkit.model.perceptron import PerceptronModel
from maxentkit.training.base import AbstractEventTrainer
from maxentkit.utils.logging import get_logger

log = get_logger(__name__)

SKIPPED_AVERAGING_WARMUP = 20


def is_perfect_square(n: int) -> bool:
    root = math.isqrt(n)
    return root * root == n


class PerceptronTrainer(AbstractEventTrainer):
    """Trainer for perceptron models."""

    ALGORITHM_NAMES = ("PERCEPTRON",)

    def is_sort_and_merge(self) -> bool:
        return False

    def _do_averaging(self, iteration: int) -> bool:
        settings = self._check_is_initialized()
        if settings.use_skipped_averaging:
            return iteration < SKIPPED_AVERAGING_WARMUP or is_perfect_square(iteration)
        return settings.use_average

    def _do_train(self, corpus: IndexedCorpus) -> PerceptronModel:
        settings = self._check_is_initialized()
        use_average = settings.use_average or settings.use_skipped_averaging
        tolerance = settings.tolerance
        step_size_decrease = settings.step_size_decrease or 0.0

        weights = np.zeros((corpus.num_predicates, corpus.num_outcomes), dtype=np.float64)
        summed = np.zeros_like(weights)
        num_times_summed = 0

        contexts = [np.asarray(c, dtype=np.int64) for c in corpus.contexts]
        values = [
            np.asarray(
                [corpus.row_value(row, j) for j in range(len(c))], dtype=np.float64
            )
            for row, c in enumerate(corpus.contexts)
        ]

        prev_accuracies = [0.0, 0.0, 0.0]
        step_size = 1.0

        for iteration in range(1, settings.iterations + 1):
            if self._cancelled():
                log.warning("Training cancelled", completed_iterations=iteration - 1)
                break
            step_size *= 1.0 - step_size_decrease

            num_correct = 0
            for row, context in enumerate(contexts):
                target = corpus.outcomes[row]
                row_values = values[row]
                for _ in range(corpus.num_times_seen[row]):
                    scores = row_values @ weights[context]
                    predicted = int(np.argmax(scores))
                    if predicted == target:
                        num_correct += 1
                    else:
                        np.add.at(weights, (context, target), step_size * row_values)
                        np.add.at(weights, (context, predicted), -step_size * row_values)

            accuracy = num_correct / corpus.num_events
            log.info(
                "Perceptron iteration",
                iteration=iteration,
                correct=num_correct,
                n_events=corpus.num_events,
                accuracy=accuracy,
            )
            self._display(f"{iteration} {num_correct} of {corpus.num_events} - {accuracy}")

            if use_average and self._do_averaging(iteration):
                summed += weights
                num_times_summed += 1

            if tolerance is not None and all(
                abs(prev - accuracy) < tolerance for prev in prev_accuracies
            ):
                log.info("Stopping: accuracy converged", tolerance=tolerance)
                break
            prev_accuracies = [prev_accuracies[1], prev_accuracies[2], accuracy]

        if use_average and num_times_summed > 0:
            final = summed / num_times_summed
        else:
            final = weights

        all_outcomes = list(range(corpus.num_outcomes))
        return PerceptronModel(
            [Context(all_outcomes, final[pid]) for pid in range(corpus.num_predicates)],
            corpus.pred_labels,
            corpus.outcome_labels,
        )
