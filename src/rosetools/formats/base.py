"""
ROSE File Base Class

Every format record is built empty, filled by one read() pass, and written
by one write() pass. The constructors here wrap the different ways a caller
can hand over a stream.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Type, TypeVar, Union

from ..utils.binary import IoBuffer


T = TypeVar('T', bound='RoseFile')


class RoseFile(ABC):
    """Base class for all ROSE file records."""

    @abstractmethod
    def read(self, io: IoBuffer):
        """Read record data from stream."""

    def write(self, io: IoBuffer):
        """
        Write record data to stream.

        Default implementation is for read-only formats.
        """
        raise NotImplementedError(f"{type(self).__name__} is read-only")

    @classmethod
    def from_buffer(cls: Type[T], io: IoBuffer) -> T:
        """Read a record from an IoBuffer positioned at its first byte."""
        rf = cls()
        rf.read(io)
        return rf

    @classmethod
    def from_stream(cls: Type[T], stream: BinaryIO) -> T:
        """Read a record from an opened binary stream."""
        return cls.from_buffer(IoBuffer(stream))

    @classmethod
    def from_bytes(cls: Type[T], data: bytes) -> T:
        """Read a record from bytes."""
        return cls.from_buffer(IoBuffer.from_bytes(data))

    @classmethod
    def from_path(cls: Type[T], path: Union[str, Path]) -> T:
        """Read a record from disk."""
        return cls.from_buffer(IoBuffer.from_file(str(path)))

    def to_bytes(self) -> bytes:
        """Encode the record into a new byte string."""
        io = IoBuffer.writer()
        self.write(io)
        return io.getvalue()

    def save(self, path: Union[str, Path]):
        """Encode the record to disk. Nothing is written if encoding fails."""
        data = self.to_bytes()
        with open(path, 'wb') as f:
            f.write(data)
