"""
Trainer registry and factory.

Maps algorithm names to trainer classes. Built-in algorithms are matched
case-insensitively; custom trainers are registered under their exact name.
"""

from collections.abc import MutableMapping
from typing import Any

from maxentkit.config.parameters import (
    ALGORITHM_PARAM,
    TRAINER_TYPE_EVENT_MODEL_SEQUENCE,
    TRAINER_TYPE_PARAM,
    TRAINER_TYPE_SEQUENCE,
    TrainingParameters,
)
from maxentkit.config.settings import TrainerSettings
from maxentkit.errors import (
    AlreadyRegisteredError,
    ConfigurationError,
    InvalidTrainerError,
    UnimplementedError,
    UnknownAlgorithmError,
)
from maxentkit.monitor import Monitor
from maxentkit.training.base import AbstractEventTrainer
from maxentkit.training.gis import GISTrainer
from maxentkit.training.perceptron import PerceptronTrainer
from maxentkit.training.quasi_newton import QNTrainer
from maxentkit.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_ALGORITHM = "MAXENT"
SEQUENCE_TRAINER_TYPES = (TRAINER_TYPE_SEQUENCE, TRAINER_TYPE_EVENT_MODEL_SEQUENCE)

BUILTIN_TRAINERS: dict[str, type[AbstractEventTrainer]] = {
    "MAXENT": GISTrainer,
    "GIS": GISTrainer,
    "PERCEPTRON": PerceptronTrainer,
    "QN": QNTrainer,
    "MAXENT_QN": QNTrainer,
}

_custom_trainers: dict[str, type] = {}


def _is_event_trainer(cls: Any) -> bool:
    return (
        isinstance(cls, type)
        and callable(getattr(cls, "init", None))
        and callable(getattr(cls, "train", None))
    )


def register_trainer(name: str, trainer_cls: type) -> None:
    """
    Register a custom trainer.

    Args:
        name: Algorithm name used in the ``Algorithm`` parameter.
        trainer_cls: Class providing ``init(parameters, report_map)`` and
            ``train(events)``.

    Raises:
        ValueError: If the name is empty.
        AlreadyRegisteredError: If the name is taken.
        InvalidTrainerError: If the class lacks the trainer methods.
    """
    if not name or not name.strip():
        raise ValueError("Trainer name must not be empty")
    if name.upper() in BUILTIN_TRAINERS or name in _custom_trainers:
        raise AlreadyRegisteredError(f"Trainer {name!r} is already registered")
    if not _is_event_trainer(trainer_cls):
        msg = f"{trainer_cls!r} is not an event trainer class (needs init and train)"
        raise InvalidTrainerError(msg)
    _custom_trainers[name] = trainer_cls
    log.info("Registered trainer", name=name, trainer=trainer_cls.__name__)


def unregister_trainer(name: str) -> None:
    """Remove a custom trainer; unknown names are ignored."""
    _custom_trainers.pop(name, None)


def list_trainers() -> list[str]:
    """All algorithm names that can be resolved."""
    return [*BUILTIN_TRAINERS, *_custom_trainers]


def _resolve(algorithm: str | None) -> tuple[type, bool]:
    """Trainer class for an algorithm name and whether it is a custom one."""
    name = algorithm if algorithm else DEFAULT_ALGORITHM
    if name in _custom_trainers:
        return _custom_trainers[name], True
    builtin = BUILTIN_TRAINERS.get(name.strip().upper())
    if builtin is not None:
        return builtin, False
    available = ", ".join(list_trainers())
    msg = f"Unknown training algorithm: {name!r}. Available: {available}"
    raise UnknownAlgorithmError(msg)


def is_valid(parameters: TrainingParameters) -> bool:
    """
    Check whether parameters name a known trainer and pass its checks.

    Returns:
        False for unknown algorithms or invalid values.
    """
    if not parameters.is_valid():
        return False
    try:
        trainer_cls, custom = _resolve(parameters.get(ALGORITHM_PARAM))
    except UnknownAlgorithmError:
        return False
    if not issubclass(trainer_cls, AbstractEventTrainer):
        return True
    try:
        trainer_cls().validate(
            TrainerSettings.from_parameters(parameters), check_algorithm=not custom
        )
    except ConfigurationError:
        return False
    return True


def get_event_trainer(
    parameters: TrainingParameters,
    report_map: MutableMapping[str, str] | None = None,
    monitor: Monitor | None = None,
) -> Any:
    """
    Create and initialize the trainer selected by ``parameters``.

    Args:
        parameters: Training parameters; GIS is used when no algorithm is
            set.
        report_map: Map receiving training metadata.
        monitor: Optional monitor for cancellation and progress.

    Returns:
        Initialized trainer.

    Raises:
        UnknownAlgorithmError: If the algorithm is not registered.
        UnimplementedError: If sequence training is requested.
        ConfigurationError: If the parameters are invalid.
    """
    trainer_type = parameters.get(TRAINER_TYPE_PARAM)
    if trainer_type in SEQUENCE_TRAINER_TYPES:
        raise UnimplementedError(f"{trainer_type} trainers are not implemented")
    trainer_cls, custom = _resolve(parameters.get(ALGORITHM_PARAM))
    report_map = report_map if report_map is not None else {}
    if issubclass(trainer_cls, AbstractEventTrainer):
        trainer = trainer_cls(monitor=monitor)
        trainer.init(parameters, report_map, check_algorithm=not custom)
    else:
        trainer = trainer_cls()
        trainer.init(parameters, report_map)
    log.debug("Created trainer", trainer=trainer_cls.__name__)
    return trainer
