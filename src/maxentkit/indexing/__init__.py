"""
Event indexing into numeric training corpora.
"""

from maxentkit.indexing.base import DataIndexer, IndexedCorpus
from maxentkit.indexing.onepass import OnePassDataIndexer
from maxentkit.indexing.twopass import TwoPassDataIndexer

__all__ = [
    "DataIndexer",
    "IndexedCorpus",
    "OnePassDataIndexer",
    "TwoPassDataIndexer",
]
