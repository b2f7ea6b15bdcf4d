"""
Model codec: binary and plain-text encodings plus file helpers.
"""

from maxentkit.io.data import (
    BinaryDataReader,
    BinaryDataWriter,
    PlainTextDataReader,
    PlainTextDataWriter,
)
from maxentkit.io.persistence import (
    deserialize,
    is_binary,
    load_model,
    save_model,
    serialize,
)
from maxentkit.io.reader import read_model
from maxentkit.io.writer import write_model

__all__ = [
    "BinaryDataReader",
    "BinaryDataWriter",
    "PlainTextDataReader",
    "PlainTextDataWriter",
    "deserialize",
    "is_binary",
    "load_model",
    "read_model",
    "save_model",
    "serialize",
    "write_model",
]
