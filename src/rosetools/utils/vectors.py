"""Plain value types shared by the format codecs."""

from dataclasses import dataclass, field


@dataclass
class Vector2:
    """2D float vector (texture coordinates)."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Vector3:
    """3D float vector/position."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __sub__(self, other: 'Vector3') -> 'Vector3':
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)


@dataclass
class Vector4:
    """4D float vector. Stored on disk as W, X, Y, Z."""
    w: float = 0.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class Vector3i16:
    """3 x int16 (triangle indices)."""
    x: int = 0
    y: int = 0
    z: int = 0


@dataclass
class Vector4i16:
    """4 x int16 (bone index slots). Stored on disk as W, X, Y, Z."""
    w: int = 0
    x: int = 0
    y: int = 0
    z: int = 0


@dataclass
class Color4:
    """RGBA float color."""
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 0.0


@dataclass
class BoundingBox:
    """Axis-aligned box."""
    min: Vector3 = field(default_factory=Vector3)
    max: Vector3 = field(default_factory=Vector3)

    @property
    def size(self) -> Vector3:
        return self.max - self.min
