"""Shared binary I/O helpers."""
from .binary import IoBuffer, decode_text, encode_text
from .paths import from_rose_path, to_rose_path
from .vectors import (
    Vector2, Vector3, Vector4, Vector3i16, Vector4i16, Color4, BoundingBox,
)

__all__ = [
    'IoBuffer', 'decode_text', 'encode_text',
    'from_rose_path', 'to_rose_path',
    'Vector2', 'Vector3', 'Vector4', 'Vector3i16', 'Vector4i16', 'Color4', 'BoundingBox',
]
