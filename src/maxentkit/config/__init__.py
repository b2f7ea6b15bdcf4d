"""
Training configuration: the flat parameter bag, typed settings and
file loading.
"""

from maxentkit.config.loader import load_parameters, save_parameters
from maxentkit.config.parameters import TrainingParameters
from maxentkit.config.settings import DataIndexerType, TrainerSettings

__all__ = [
    "DataIndexerType",
    "TrainerSettings",
    "TrainingParameters",
    "load_parameters",
    "save_parameters",
]
