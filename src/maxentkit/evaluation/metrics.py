"""
Evaluation metrics for trained models.

Scores a model on held-out events and reports accuracy and log-loss.
"""

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
from sklearn.metrics import accuracy_score, log_loss

from maxentkit.errors import InvalidInputError
from maxentkit.events.event import Event
from maxentkit.model.base import AbstractModel
from maxentkit.model.hashtable import NOT_FOUND
from maxentkit.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class ClassificationMetrics:
    """
    Classification metrics of a model on an event stream.

    Attributes:
        accuracy: Share of events whose best outcome is the gold outcome.
        log_loss: Mean negative log probability of the gold outcome, over
            events with an outcome known to the model.
        n_events: Number of evaluated events.
        n_unknown_outcomes: Events whose gold outcome the model cannot
            produce (counted as errors, excluded from log-loss).
    """

    accuracy: float
    log_loss: float
    n_events: int
    n_unknown_outcomes: int

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return {
            "accuracy": self.accuracy,
            "log_loss": self.log_loss,
            "n_events": self.n_events,
            "n_unknown_outcomes": self.n_unknown_outcomes,
        }

    def __str__(self) -> str:
        """String representation."""
        return (
            f"Accuracy={self.accuracy:.4f}, LogLoss={self.log_loss:.4f}, "
            f"n={self.n_events}"
        )


def evaluate_model(model: AbstractModel, events: Iterable[Event]) -> ClassificationMetrics:
    """
    Evaluate a model on events.

    Args:
        model: Trained model.
        events: Gold-labelled events.

    Returns:
        ClassificationMetrics object.

    Raises:
        InvalidInputError: If there are no events.
    """
    y_true: list[int] = []
    y_pred: list[int] = []
    probs: list[list[float]] = []

    for event in events:
        dist = model.eval(event.context, event.values)
        y_true.append(model.get_index(event.outcome))
        y_pred.append(int(np.argmax(dist)))
        probs.append(dist)

    if not y_true:
        raise InvalidInputError("Cannot evaluate a model on an empty event stream")

    y_true_arr = np.asarray(y_true)
    known = y_true_arr != NOT_FOUND
    n_unknown = int((~known).sum())
    if n_unknown:
        log.warning("Events with outcomes unknown to the model", n_events=n_unknown)

    accuracy = float(accuracy_score(y_true_arr, np.asarray(y_pred)))
    if known.any() and model.num_outcomes > 1:
        loss = float(
            log_loss(
                y_true_arr[known],
                np.asarray(probs)[known],
                labels=list(range(model.num_outcomes)),
            )
        )
    else:
        loss = 0.0

    metrics = ClassificationMetrics(
        accuracy=accuracy,
        log_loss=loss,
        n_events=len(y_true),
        n_unknown_outcomes=n_unknown,
    )
    log.info("Evaluated model", **metrics.to_dict())
    return metrics
