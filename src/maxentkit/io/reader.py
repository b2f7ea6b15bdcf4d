"""
Model reader, the inverse of ``maxentkit.io.writer``.
"""

from maxentkit.errors import CorruptModelError
from maxentkit.io.data import DataReader
from maxentkit.model.base import AbstractModel
from maxentkit.model.context import Context
from maxentkit.model.gis import GISModel
from maxentkit.model.perceptron import PerceptronModel
from maxentkit.model.qn import QNModel
from maxentkit.utils.logging import get_logger

log = get_logger(__name__)

MODEL_CLASSES: dict[str, type[AbstractModel]] = {
    "GIS": GISModel,
    "Perceptron": PerceptronModel,
    "QN": QNModel,
}


def _read_count(reader: DataReader, what: str) -> int:
    count = reader.read_int()
    if count < 0:
        raise CorruptModelError(f"Negative {what} count: {count}")
    return count


def _parse_pattern(text: str, num_outcomes: int) -> tuple[int, list[int]]:
    try:
        numbers = [int(token) for token in text.split()]
    except ValueError as e:
        raise CorruptModelError(f"Invalid outcome pattern: {text!r}") from e
    if not numbers or numbers[0] < 0:
        raise CorruptModelError(f"Invalid outcome pattern: {text!r}")
    count, outcomes = numbers[0], numbers[1:]
    if len(set(outcomes)) != len(outcomes):
        raise CorruptModelError(f"Repeated outcome id in pattern: {text!r}")
    if any(o < 0 or o >= num_outcomes for o in outcomes):
        raise CorruptModelError(f"Outcome id out of range in pattern: {text!r}")
    return count, outcomes


def read_model(reader: DataReader) -> AbstractModel:
    """
    Decode a model from a data reader.

    Raises:
        CorruptModelError: If the data does not describe a valid model or
            has trailing content.
    """
    tag = reader.read_string()
    model_cls = MODEL_CLASSES.get(tag)
    if model_cls is None:
        raise CorruptModelError(f"Unknown model type: {tag!r}")

    correction_constant, correction_param = 1.0, 0.0
    if model_cls is GISModel:
        correction_constant = float(reader.read_int())
        correction_param = reader.read_double()
        if correction_constant <= 0:
            raise CorruptModelError(
                f"Invalid correction constant: {correction_constant}"
            )

    num_outcomes = _read_count(reader, "outcome")
    outcome_labels = [reader.read_string() for _ in range(num_outcomes)]

    num_patterns = _read_count(reader, "pattern")
    patterns = [
        _parse_pattern(reader.read_string(), num_outcomes) for _ in range(num_patterns)
    ]

    num_predicates = _read_count(reader, "predicate")
    if sum(count for count, _ in patterns) != num_predicates:
        msg = (
            f"Outcome patterns cover {sum(c for c, _ in patterns)} predicates, "
            f"model declares {num_predicates}"
        )
        raise CorruptModelError(msg)
    pred_labels = [reader.read_string() for _ in range(num_predicates)]

    parameters: list[Context] = []
    for count, outcomes in patterns:
        for _ in range(count):
            parameters.append(
                Context(outcomes, [reader.read_double() for _ in outcomes])
            )

    if not reader.at_end():
        raise CorruptModelError("Trailing data after model")

    try:
        model = model_cls(
            parameters,
            pred_labels,
            outcome_labels,
            correction_constant=correction_constant,
            correction_param=correction_param,
        )
    except ValueError as e:
        raise CorruptModelError(f"Inconsistent model data: {e}") from e

    log.debug(
        "Read model",
        model_type=tag,
        n_outcomes=num_outcomes,
        n_predicates=num_predicates,
    )
    return model
