"""Binary I/O primitives shared by every ROSE format codec."""

import struct
from typing import BinaryIO
from io import BytesIO

from ..config import get_config
from ..errors import StreamExhaustedError, SequenceTooLargeError, ValueOutOfRangeError
from .vectors import (
    Vector2, Vector3, Vector4, Vector3i16, Vector4i16, Color4, BoundingBox,
)


# ROSE files are little-endian throughout
ENDIAN = "<"


def decode_text(data: bytes) -> str:
    """Best-effort bytes -> text. Invalid sequences are replaced, never rejected."""
    config = get_config()
    return data.decode(config.text_encoding, errors=config.text_errors)


def encode_text(text: str) -> bytes:
    """Text -> raw bytes as written to disk."""
    config = get_config()
    return text.encode(config.text_encoding, errors=config.text_errors)


# Length prefix limits for write_string_*
U8_MAX = 0xFF
U16_MAX = 0xFFFF
U32_MAX = 0xFFFFFFFF


def check_prefixed(text: str, limit: int, operation: str) -> bytes:
    """Encode text for a length-prefixed field, rejecting it if the prefix can't hold it."""
    data = encode_text(text)
    if len(data) > limit:
        raise SequenceTooLargeError(operation, len(data), limit)
    return data


class IoBuffer:
    """
    Binary reader/writer.

    The position is tracked here rather than asked of the stream, so
    sequential reads and writes work on pipes and sockets. Only seek()
    and has_bytes() need a seekable stream.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self._offset = stream.tell() if stream.seekable() else 0

    @classmethod
    def from_bytes(cls, data: bytes) -> 'IoBuffer':
        """Create from bytes."""
        return cls(BytesIO(data))

    @classmethod
    def from_file(cls, filepath: str) -> 'IoBuffer':
        """Create from file path."""
        with open(filepath, 'rb') as f:
            data = f.read()
        return cls.from_bytes(data)

    @classmethod
    def writer(cls) -> 'IoBuffer':
        """Create an empty in-memory buffer for encoding."""
        return cls(BytesIO())

    def getvalue(self) -> bytes:
        """Everything written so far (in-memory buffers only)."""
        return self.stream.getvalue()

    @property
    def position(self) -> int:
        """Current position in stream."""
        return self._offset

    @position.setter
    def position(self, value: int):
        """Seek to position."""
        self.seek(value)

    @property
    def has_more(self) -> bool:
        """Check if there are more bytes to read."""
        return self.has_bytes(1)

    def has_bytes(self, num_bytes: int) -> bool:
        """Check if there are at least num_bytes remaining."""
        current = self.stream.tell()
        end = self.stream.seek(0, 2)
        self.stream.seek(current)
        return (end - current) >= num_bytes

    def seek(self, offset: int, whence: int = 0) -> int:
        """Seek in stream (whence: 0=start, 1=current, 2=end)."""
        self._offset = self.stream.seek(offset, whence)
        return self._offset

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def _read_exact(self, count: int, operation: str) -> bytes:
        start = self._offset
        data = self.stream.read(count)
        self._offset += len(data)
        if len(data) != count:
            raise StreamExhaustedError(operation, count, len(data), start)
        return data

    def _unpack(self, code: str, size: int, operation: str):
        return struct.unpack(ENDIAN + code, self._read_exact(size, operation))[0]

    def read_bytes(self, count: int) -> bytes:
        """Read exactly count raw bytes."""
        return self._read_exact(count, "read_bytes")

    def read_uint8(self) -> int:
        """Read unsigned 8-bit integer."""
        return self._unpack('B', 1, "read_uint8")

    def read_int8(self) -> int:
        """Read signed 8-bit integer."""
        return self._unpack('b', 1, "read_int8")

    def read_uint16(self) -> int:
        """Read unsigned 16-bit integer."""
        return self._unpack('H', 2, "read_uint16")

    def read_int16(self) -> int:
        """Read signed 16-bit integer."""
        return self._unpack('h', 2, "read_int16")

    def read_uint32(self) -> int:
        """Read unsigned 32-bit integer."""
        return self._unpack('I', 4, "read_uint32")

    def read_int32(self) -> int:
        """Read signed 32-bit integer."""
        return self._unpack('i', 4, "read_int32")

    def read_float(self) -> float:
        """Read 32-bit float."""
        return self._unpack('f', 4, "read_float")

    def read_double(self) -> float:
        """Read 64-bit double."""
        return self._unpack('d', 8, "read_double")

    def read_bool(self) -> bool:
        """Read a one-byte bool (any nonzero value is True)."""
        return self._read_exact(1, "read_bool")[0] != 0

    def read_cstring(self) -> str:
        """Read a null-terminated string. The terminator is consumed."""
        start = self._offset
        buf = bytearray()
        while True:
            b = self.stream.read(1)
            if not b:
                raise StreamExhaustedError("read_cstring", len(buf) + 1, len(buf), start)
            self._offset += 1
            if b == b"\0":
                break
            buf += b
        return decode_text(bytes(buf))

    def read_string(self, length: int) -> str:
        """Read a fixed-length string, dropping one trailing NUL if present."""
        data = self._read_exact(length, "read_string")
        if data[-1:] == b"\0":
            data = data[:-1]
        return decode_text(data)

    def read_string_u8(self) -> str:
        """Read string with a uint8 length prefix."""
        return self.read_string(self.read_uint8())

    def read_string_u16(self) -> str:
        """Read string with a uint16 length prefix."""
        return self.read_string(self.read_uint16())

    def read_string_u32(self) -> str:
        """Read string with a uint32 length prefix."""
        return self.read_string(self.read_uint32())

    def read_vector2(self) -> Vector2:
        return Vector2(self.read_float(), self.read_float())

    def read_vector3(self) -> Vector3:
        return Vector3(self.read_float(), self.read_float(), self.read_float())

    def read_vector4(self) -> Vector4:
        # W first
        return Vector4(self.read_float(), self.read_float(), self.read_float(), self.read_float())

    def read_vector3_i16(self) -> Vector3i16:
        return Vector3i16(self.read_int16(), self.read_int16(), self.read_int16())

    def read_vector4_i16(self) -> Vector4i16:
        return Vector4i16(self.read_int16(), self.read_int16(), self.read_int16(), self.read_int16())

    def read_color4(self) -> Color4:
        return Color4(self.read_float(), self.read_float(), self.read_float(), self.read_float())

    def read_bounding_box(self) -> BoundingBox:
        bb_min = self.read_vector3()
        bb_max = self.read_vector3()
        return BoundingBox(bb_min, bb_max)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def write_bytes(self, data: bytes):
        """Write raw bytes."""
        self.stream.write(data)
        self._offset += len(data)

    def _pack(self, code: str, value, operation: str):
        try:
            data = struct.pack(ENDIAN + code, value)
        except (struct.error, OverflowError) as e:
            raise ValueOutOfRangeError(operation, value, str(e)) from e
        self.write_bytes(data)

    def write_uint8(self, value: int):
        self._pack('B', value, "write_uint8")

    def write_int8(self, value: int):
        self._pack('b', value, "write_int8")

    def write_uint16(self, value: int):
        """Write unsigned 16-bit integer."""
        self._pack('H', value, "write_uint16")

    def write_int16(self, value: int):
        self._pack('h', value, "write_int16")

    def write_uint32(self, value: int):
        """Write unsigned 32-bit integer."""
        self._pack('I', value, "write_uint32")

    def write_int32(self, value: int):
        self._pack('i', value, "write_int32")

    def write_float(self, value: float):
        self._pack('f', value, "write_float")

    def write_double(self, value: float):
        self._pack('d', value, "write_double")

    def write_bool(self, value: bool):
        self._pack('B', 1 if value else 0, "write_bool")

    def write_cstring(self, text: str):
        """Write text followed by a single NUL."""
        self.write_bytes(encode_text(text) + b"\0")

    def write_string_u8(self, text: str):
        """Write string with a uint8 length prefix (no terminator)."""
        data = check_prefixed(text, U8_MAX, "write_string_u8")
        self.write_uint8(len(data))
        self.write_bytes(data)

    def write_string_u16(self, text: str):
        """Write string with a uint16 length prefix (no terminator)."""
        data = check_prefixed(text, U16_MAX, "write_string_u16")
        self.write_uint16(len(data))
        self.write_bytes(data)

    def write_string_u32(self, text: str):
        """Write string with a uint32 length prefix (no terminator)."""
        data = check_prefixed(text, U32_MAX, "write_string_u32")
        self.write_uint32(len(data))
        self.write_bytes(data)

    def write_vector2(self, v: Vector2):
        self.write_float(v.x)
        self.write_float(v.y)

    def write_vector3(self, v: Vector3):
        self.write_float(v.x)
        self.write_float(v.y)
        self.write_float(v.z)

    def write_vector4(self, v: Vector4):
        self.write_float(v.w)
        self.write_float(v.x)
        self.write_float(v.y)
        self.write_float(v.z)

    def write_vector3_i16(self, v: Vector3i16):
        self.write_int16(v.x)
        self.write_int16(v.y)
        self.write_int16(v.z)

    def write_vector4_i16(self, v: Vector4i16):
        self.write_int16(v.w)
        self.write_int16(v.x)
        self.write_int16(v.y)
        self.write_int16(v.z)

    def write_color4(self, c: Color4):
        self.write_float(c.r)
        self.write_float(c.g)
        self.write_float(c.b)
        self.write_float(c.a)

    def write_bounding_box(self, bb: BoundingBox):
        self.write_vector3(bb.min)
        self.write_vector3(bb.max)
