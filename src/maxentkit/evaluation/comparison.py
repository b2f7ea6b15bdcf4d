"""
Algorithm comparison.

Trains several algorithms on the same train/test split of an event
collection and evaluates each on the held-out part.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sklearn.model_selection import train_test_split

from maxentkit.config.parameters import ALGORITHM_PARAM, TrainingParameters
from maxentkit.errors import InvalidInputError
from maxentkit.evaluation.metrics import ClassificationMetrics, evaluate_model
from maxentkit.events.event import Event
from maxentkit.training.factory import get_event_trainer
from maxentkit.utils.logging import get_logger, log_context

log = get_logger(__name__)

DEFAULT_ALGORITHMS = ("MAXENT", "PERCEPTRON", "QN")


@dataclass(frozen=True)
class ComparisonResult:
    """Held-out metrics of one algorithm."""

    algorithm: str
    metrics: ClassificationMetrics
    n_train_events: int


def compare_algorithms(
    events: Iterable[Event],
    parameters: TrainingParameters | None = None,
    algorithms: Sequence[str] = DEFAULT_ALGORITHMS,
    test_size: float = 0.2,
    random_state: int = 42,
) -> list[ComparisonResult]:
    """
    Compare algorithms on a shared train/test split.

    Args:
        events: Gold-labelled events; read once into memory.
        parameters: Base training parameters; ``Algorithm`` is overridden
            per run.
        algorithms: Algorithm names to train.
        test_size: Share of events held out for evaluation.
        random_state: Seed for the split.

    Returns:
        One result per algorithm, best accuracy first.

    Raises:
        InvalidInputError: If there are fewer than two events.
    """
    events = list(events)
    if len(events) < 2:
        raise InvalidInputError("Need at least two events to compare algorithms")

    train_events, test_events = train_test_split(
        events, test_size=test_size, random_state=random_state
    )
    base = parameters if parameters is not None else TrainingParameters.default_parameters()

    results = []
    for algorithm in algorithms:
        run_parameters = TrainingParameters(base.to_dict())
        run_parameters.set(ALGORITHM_PARAM, algorithm)
        with log_context(algorithm=algorithm):
            model = get_event_trainer(run_parameters).train(train_events)
            metrics = evaluate_model(model, test_events)
            log.info("Evaluated algorithm", **metrics.to_dict())
        results.append(ComparisonResult(algorithm, metrics, len(train_events)))

    return sorted(results, key=lambda r: r.metrics.accuracy, reverse=True)
