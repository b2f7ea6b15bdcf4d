"""
Model trainers and the trainer factory.
"""

from maxentkit.training.base import AbstractEventTrainer
from maxentkit.training.factory import (
    get_event_trainer,
    is_valid,
    list_trainers,
    register_trainer,
    unregister_trainer,
)
from maxentkit.training.gis import GISTrainer
from maxentkit.training.perceptron import PerceptronTrainer
from maxentkit.training.quasi_newton import QNTrainer

__all__ = [
    "AbstractEventTrainer",
    "GISTrainer",
    "PerceptronTrainer",
    "QNTrainer",
    "get_event_trainer",
    "is_valid",
    "list_trainers",
    "register_trainer",
    "unregister_trainer",
]
