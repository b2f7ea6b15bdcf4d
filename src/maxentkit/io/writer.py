"""
Model writer.

Layout, item by item:

    type string          "GIS" | "Perceptron" | "QN"
    [GIS] int            correction constant
    [GIS] double         correction parameter
    int + strings        outcome labels
    int + strings        outcome patterns, "<n_preds> <oid> <oid> ..."
    int + strings        predicate labels, grouped by pattern
    doubles              parameters, predicate by predicate

Predicates are sorted by their active outcomes so that predicates sharing
the same outcomes form one pattern.
"""

from dataclasses import dataclass

from maxentkit.io.data import DataWriter
from maxentkit.model.base import AbstractModel, ModelType
from maxentkit.utils.logging import get_logger

log = get_logger(__name__)

MODEL_TYPE_TAGS: dict[ModelType, str] = {
    ModelType.MAXENT: "GIS",
    ModelType.PERCEPTRON: "Perceptron",
    ModelType.MAXENT_QN: "QN",
}


@dataclass(frozen=True)
class _Predicate:
    name: str
    outcomes: tuple[int, ...]
    parameters: tuple[float, ...]


def _sorted_predicates(model: AbstractModel) -> list[_Predicate]:
    parameters, _, _, _, _ = model.get_data_structures()
    drop_zeros = model.model_type == ModelType.PERCEPTRON
    predicates: list[_Predicate] = []
    for name, context in zip(model.pred_labels, parameters):
        pairs = [
            (int(o), float(p))
            for o, p in zip(context.outcomes, context.parameters)
            if not (drop_zeros and p == 0.0)
        ]
        if drop_zeros and not pairs:
            continue
        predicates.append(
            _Predicate(name, tuple(o for o, _ in pairs), tuple(p for _, p in pairs))
        )
    return sorted(predicates, key=lambda p: p.outcomes)


def _compress_outcomes(predicates: list[_Predicate]) -> list[list[_Predicate]]:
    groups: list[list[_Predicate]] = []
    for pred in predicates:
        if groups and groups[-1][0].outcomes == pred.outcomes:
            groups[-1].append(pred)
        else:
            groups.append([pred])
    return groups


def write_model(model: AbstractModel, writer: DataWriter) -> None:
    """
    Persist a model through a data writer.

    Args:
        model: Model to write.
        writer: Binary or plain-text data writer.
    """
    tag = MODEL_TYPE_TAGS[model.model_type]
    _, _, outcome_names, correction_constant, correction_param = (
        model.get_data_structures()
    )

    writer.write_string(tag)
    if model.model_type == ModelType.MAXENT:
        writer.write_int(int(correction_constant))
        writer.write_double(correction_param)

    writer.write_int(len(outcome_names))
    for name in outcome_names:
        writer.write_string(name)

    predicates = _sorted_predicates(model)
    groups = _compress_outcomes(predicates)
    writer.write_int(len(groups))
    for group in groups:
        writer.write_string(" ".join(str(x) for x in (len(group), *group[0].outcomes)))

    writer.write_int(len(predicates))
    for pred in predicates:
        writer.write_string(pred.name)
    for pred in predicates:
        for value in pred.parameters:
            writer.write_double(value)

    writer.close()
    log.debug(
        "Wrote model",
        model_type=tag,
        n_outcomes=len(outcome_names),
        n_predicates=len(predicates),
        n_patterns=len(groups),
    )
