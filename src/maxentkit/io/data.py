"""
Primitive readers and writers for persisted models.

Binary streams use big-endian 32-bit integers, IEEE-754 big-endian
doubles and strings prefixed by an unsigned 16-bit byte length (the
layout of Java's ``DataOutputStream``). Plain-text streams hold one value
per line.
"""

import struct
from abc import ABC, abstractmethod
from typing import IO

from maxentkit.errors import CorruptModelError

_INT = struct.Struct(">i")
_DOUBLE = struct.Struct(">d")
_USHORT = struct.Struct(">H")

MAX_STRING_BYTES = 0xFFFF


class DataWriter(ABC):
    """Writes the primitive values of a model."""

    def __init__(self, stream: IO) -> None:
        self.stream = stream

    @abstractmethod
    def write_string(self, value: str) -> None: ...

    @abstractmethod
    def write_int(self, value: int) -> None: ...

    @abstractmethod
    def write_double(self, value: float) -> None: ...

    def close(self) -> None:
        self.stream.flush()


class DataReader(ABC):
    """Reads the primitive values of a model."""

    def __init__(self, stream: IO) -> None:
        self.stream = stream

    @abstractmethod
    def read_string(self) -> str: ...

    @abstractmethod
    def read_int(self) -> int: ...

    @abstractmethod
    def read_double(self) -> float: ...

    @abstractmethod
    def at_end(self) -> bool:
        """Whether the stream has no data left."""
        ...


class BinaryDataWriter(DataWriter):
    """Big-endian binary writer over a byte stream."""

    def write_string(self, value: str) -> None:
        data = value.encode("utf-8")
        if len(data) > MAX_STRING_BYTES:
            msg = f"String too long to encode ({len(data)} bytes): {value[:40]!r}..."
            raise ValueError(msg)
        self.stream.write(_USHORT.pack(len(data)))
        self.stream.write(data)

    def write_int(self, value: int) -> None:
        self.stream.write(_INT.pack(value))

    def write_double(self, value: float) -> None:
        self.stream.write(_DOUBLE.pack(value))


class BinaryDataReader(DataReader):
    """Big-endian binary reader over a byte stream."""

    def _read(self, n: int) -> bytes:
        data = self.stream.read(n)
        if len(data) != n:
            raise CorruptModelError(
                f"Unexpected end of model data: wanted {n} bytes, got {len(data)}"
            )
        return data

    def read_string(self) -> str:
        (length,) = _USHORT.unpack(self._read(_USHORT.size))
        try:
            return self._read(length).decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptModelError(f"Invalid UTF-8 string in model: {e}") from e

    def read_int(self) -> int:
        return _INT.unpack(self._read(_INT.size))[0]

    def read_double(self) -> float:
        return _DOUBLE.unpack(self._read(_DOUBLE.size))[0]

    def at_end(self) -> bool:
        return self.stream.read(1) == b""


class PlainTextDataWriter(DataWriter):
    """Writer putting one value per line on a text stream."""

    def write_string(self, value: str) -> None:
        if "\n" in value or "\r" in value:
            raise ValueError(f"Line breaks cannot be stored in text models: {value!r}")
        self.stream.write(value + "\n")

    def write_int(self, value: int) -> None:
        self.stream.write(f"{value}\n")

    def write_double(self, value: float) -> None:
        self.stream.write(f"{value!r}\n")


class PlainTextDataReader(DataReader):
    """Reader for one-value-per-line text streams."""

    def _read_line(self) -> str:
        line = self.stream.readline()
        if not line:
            raise CorruptModelError("Unexpected end of model data")
        return line.rstrip("\r\n")

    def read_string(self) -> str:
        return self._read_line()

    def read_int(self) -> int:
        line = self._read_line()
        try:
            return int(line)
        except ValueError as e:
            raise CorruptModelError(f"Expected an integer, got {line!r}") from e

    def read_double(self) -> float:
        line = self._read_line()
        try:
            return float(line)
        except ValueError as e:
            raise CorruptModelError(f"Expected a number, got {line!r}") from e

    def at_end(self) -> bool:
        return all(not line.strip() for line in self.stream)
