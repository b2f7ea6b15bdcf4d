"""
maxentkit: Maximum-entropy modeling core for NLP annotators.

This package provides event indexing, GIS / perceptron / quasi-Newton
trainers, the scoring model API and a binary/text model codec that is
compatible with the OpenNLP maxent model format.
"""

from importlib.metadata import version

__version__ = version("maxentkit")

__all__ = ["__version__"]
