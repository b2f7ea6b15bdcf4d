"""
Trained models and their scoring API.
"""

from maxentkit.model.base import AbstractModel, ModelType
from maxentkit.model.context import Context, EvalParameters, MutableContext
from maxentkit.model.gis import GISModel
from maxentkit.model.hashtable import NOT_FOUND, IndexHashTable
from maxentkit.model.perceptron import PerceptronModel
from maxentkit.model.prior import UniformPrior
from maxentkit.model.qn import QNModel

__all__ = [
    "NOT_FOUND",
    "AbstractModel",
    "Context",
    "EvalParameters",
    "GISModel",
    "IndexHashTable",
    "ModelType",
    "MutableContext",
    "PerceptronModel",
    "QNModel",
    "UniformPrior",
]
