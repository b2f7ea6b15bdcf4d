"""
Model persistence (serialize/deserialize, save/load).

Files ending in ``.bin`` (optionally followed by ``.gz``) use the binary
encoding; every other name uses the plain-text encoding. A trailing
``.gz`` adds gzip compression.
"""

import gzip
import io
import struct
import zlib
from pathlib import Path

from maxentkit.errors import CorruptModelError
from maxentkit.io.data import (
    BinaryDataReader,
    BinaryDataWriter,
    DataReader,
    PlainTextDataReader,
    PlainTextDataWriter,
)
from maxentkit.io.reader import MODEL_CLASSES, read_model
from maxentkit.io.writer import write_model
from maxentkit.model.base import AbstractModel
from maxentkit.utils.logging import get_logger

log = get_logger(__name__)

BINARY_SUFFIX = ".bin"
GZIP_SUFFIX = ".gz"


def serialize(model: AbstractModel, binary: bool = True) -> bytes:
    """
    Encode a model.

    Args:
        model: Model to encode.
        binary: Binary encoding if True, plain text otherwise.

    Returns:
        Encoded model.
    """
    if binary:
        buffer = io.BytesIO()
        write_model(model, BinaryDataWriter(buffer))
        return buffer.getvalue()
    text = io.StringIO()
    write_model(model, PlainTextDataWriter(text))
    return text.getvalue().encode("utf-8")


def is_binary(data: bytes) -> bool:
    """Whether ``data`` starts with a binary-encoded model type tag."""
    if len(data) < 2:
        return False
    (length,) = struct.unpack(">H", data[:2])
    return data[2 : 2 + length].decode("utf-8", errors="replace") in MODEL_CLASSES


def _text_reader(data: bytes) -> DataReader:
    try:
        return PlainTextDataReader(io.StringIO(data.decode("utf-8"), newline=None))
    except UnicodeDecodeError as e:
        raise CorruptModelError(f"Model data is neither binary nor UTF-8 text: {e}") from e


def deserialize(data: bytes, binary: bool | None = None) -> AbstractModel:
    """
    Decode a model.

    Args:
        data: Encoded model.
        binary: Force the binary (True) or text (False) encoding; detected
            from the data when None.

    Returns:
        Decoded model.

    Raises:
        CorruptModelError: If the data is not a valid model.
    """
    if binary is None:
        binary = is_binary(data)
    reader = BinaryDataReader(io.BytesIO(data)) if binary else _text_reader(data)
    return read_model(reader)


def _encoding_for(path: Path) -> tuple[bool, bool]:
    """(binary, compressed) for a model file name."""
    suffixes = [s.lower() for s in path.suffixes]
    compressed = bool(suffixes) and suffixes[-1] == GZIP_SUFFIX
    if compressed:
        suffixes = suffixes[:-1]
    binary = bool(suffixes) and suffixes[-1] == BINARY_SUFFIX
    return binary, compressed


def save_model(model: AbstractModel, path: Path) -> Path:
    """
    Save a model, choosing the encoding from the file name.

    Args:
        model: Model to save.
        path: Output file.

    Returns:
        The written path.
    """
    path = Path(path)
    binary, compressed = _encoding_for(path)
    data = serialize(model, binary=binary)

    path.parent.mkdir(parents=True, exist_ok=True)
    opener = gzip.open if compressed else open
    with opener(path, "wb") as f:
        f.write(data)

    log.info(
        "Saved model",
        path=str(path),
        model_type=model.model_type.value,
        binary=binary,
        compressed=compressed,
    )
    return path


def load_model(path: Path) -> AbstractModel:
    """
    Load a model saved by ``save_model``.

    Raises:
        FileNotFoundError: If the file does not exist.
        CorruptModelError: If the file is not a valid model.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model file not found: {path}")
    binary, compressed = _encoding_for(path)

    opener = gzip.open if compressed else open
    try:
        with opener(path, "rb") as f:
            data = f.read()
    except (OSError, EOFError, zlib.error) as e:
        if not compressed:
            raise
        raise CorruptModelError(f"Invalid gzip data in {path}: {e}") from e

    model = deserialize(data, binary=binary)
    log.info("Loaded model", path=str(path), model_type=model.model_type.value)
    return model
