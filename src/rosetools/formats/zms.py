"""
ZMS Model - ROSE Online 3D mesh container

ZMS Structure:
  1. IDENTIFIER    - null-terminated "ZMS0007" / "ZMS0008"
  2. FORMAT        - int32 vertex format bitmask
  3. BOUNDING BOX  - min, max (3 x float each)
  4. BONES         - int16 count + int16 bone indices
  5. VERTICES      - int16 count, then one full column per enabled attribute:
                     position, normal, color, bone (weights + indices),
                     tangent, uv1, uv2, uv3, uv4
  6. INDICES       - int16 count + triangles (3 x int16)
  7. MATERIALS     - int16 count + int16 ids
  8. STRIPS        - int16 count + int16 indices
  9. POOL          - int16 vertex buffer pool type (ZMS0008 only)

Attributes are stored column by column: every vertex's position, then every
vertex's normal, and so on. The writer always emits ZMS0008, so a ZMS0007
input comes back out upgraded.
"""

import logging
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Callable, List, NamedTuple, Optional

from ..errors import UnsupportedVersionError, SequenceTooLargeError
from ..utils.binary import IoBuffer
from ..utils.vectors import (
    Vector2, Vector3, Vector4, Vector3i16, Vector4i16, Color4, BoundingBox,
)
from .base import RoseFile


logger = logging.getLogger(__name__)


IDENTIFIERS = {
    "ZMS0007": 7,
    "ZMS0008": 8,
}
LATEST_IDENTIFIER = "ZMS0008"

# Every count in the file is an int16
MAX_COUNT = 0x7FFF


class VertexFormat(IntFlag):
    """Bits of the ZMS format field. Bit 0 is unused."""
    POSITION = 1 << 1
    NORMAL = 1 << 2
    COLOR = 1 << 3
    BONE_WEIGHT = 1 << 4
    BONE_INDEX = 1 << 5
    TANGENT = 1 << 6
    UV1 = 1 << 7
    UV2 = 1 << 8
    UV3 = 1 << 9
    UV4 = 1 << 10


@dataclass
class ModelVertex:
    """One vertex. Attributes not enabled by the format stay at their defaults."""
    position: Vector3 = field(default_factory=Vector3)
    normal: Vector3 = field(default_factory=Vector3)
    color: Color4 = field(default_factory=Color4)
    bone_weights: Vector4 = field(default_factory=Vector4)
    bone_indices: Vector4i16 = field(default_factory=Vector4i16)
    tangent: Vector3 = field(default_factory=Vector3)
    uv1: Vector2 = field(default_factory=Vector2)
    uv2: Vector2 = field(default_factory=Vector2)
    uv3: Vector2 = field(default_factory=Vector2)
    uv4: Vector2 = field(default_factory=Vector2)


class VertexColumn(NamedTuple):
    """One attribute column: the format bits gating it and how to move it."""
    name: str
    flags: VertexFormat
    read: Callable[[IoBuffer, ModelVertex], None]
    write: Callable[[IoBuffer, ModelVertex], None]

    def enabled(self, fmt: int) -> bool:
        # All gating bits must be present (bones need weight AND index)
        return (fmt & self.flags) == self.flags


def _read_bones(io: IoBuffer, v: ModelVertex):
    v.bone_weights = io.read_vector4()
    v.bone_indices = io.read_vector4_i16()


def _write_bones(io: IoBuffer, v: ModelVertex):
    io.write_vector4(v.bone_weights)
    io.write_vector4_i16(v.bone_indices)


def _vector3_column(name: str, flags: VertexFormat) -> VertexColumn:
    def read(io: IoBuffer, v: ModelVertex):
        setattr(v, name, io.read_vector3())

    def write(io: IoBuffer, v: ModelVertex):
        io.write_vector3(getattr(v, name))

    return VertexColumn(name, flags, read, write)


def _uv_column(name: str, flags: VertexFormat) -> VertexColumn:
    def read(io: IoBuffer, v: ModelVertex):
        setattr(v, name, io.read_vector2())

    def write(io: IoBuffer, v: ModelVertex):
        io.write_vector2(getattr(v, name))

    return VertexColumn(name, flags, read, write)


def _read_color(io: IoBuffer, v: ModelVertex):
    v.color = io.read_color4()


def _write_color(io: IoBuffer, v: ModelVertex):
    io.write_color4(v.color)


# On-disk column order
VERTEX_COLUMNS: List[VertexColumn] = [
    _vector3_column("position", VertexFormat.POSITION),
    _vector3_column("normal", VertexFormat.NORMAL),
    VertexColumn("color", VertexFormat.COLOR, _read_color, _write_color),
    VertexColumn("bones", VertexFormat.BONE_WEIGHT | VertexFormat.BONE_INDEX,
                 _read_bones, _write_bones),
    _vector3_column("tangent", VertexFormat.TANGENT),
    _uv_column("uv1", VertexFormat.UV1),
    _uv_column("uv2", VertexFormat.UV2),
    _uv_column("uv3", VertexFormat.UV3),
    _uv_column("uv4", VertexFormat.UV4),
]

_COLUMNS_BY_NAME = {c.name: c for c in VERTEX_COLUMNS}


def _read_count(io: IoBuffer, what: str) -> int:
    count = io.read_int16()
    if count < 0:
        logger.warning(f"ZMS: negative {what} count {count}, treating as empty")
    return count


def _check_count(items: list, what: str):
    if len(items) > MAX_COUNT:
        raise SequenceTooLargeError(f"write_{what}", len(items), MAX_COUNT)


@dataclass
class ModelFile(RoseFile):
    """
    ZMS model record.

    Usage:
        model = ModelFile.from_path("HEADBAD01.ZMS")
        for v in model.vertices:
            print(v.position)
        data = model.to_bytes()  # always ZMS0008
    """
    identifier: str = ""
    format: int = -1
    bounding_box: BoundingBox = field(default_factory=BoundingBox)
    bones: List[int] = field(default_factory=list)
    vertices: List[ModelVertex] = field(default_factory=list)
    indices: List[Vector3i16] = field(default_factory=list)
    materials: List[int] = field(default_factory=list)
    strips: List[int] = field(default_factory=list)

    # Vertex buffer pool [Static/Dynamic/System]
    pool: int = 0

    # ------------------------------------------------------------------
    # Format queries
    # ------------------------------------------------------------------

    @property
    def version(self) -> Optional[int]:
        """Numeric version for the identifier, or None if unknown."""
        return IDENTIFIERS.get(self.identifier)

    def column_enabled(self, name: str) -> bool:
        return _COLUMNS_BY_NAME[name].enabled(self.format)

    def enabled_columns(self) -> List[str]:
        """Names of the vertex columns present, in on-disk order."""
        return [c.name for c in VERTEX_COLUMNS if c.enabled(self.format)]

    def positions_enabled(self) -> bool:
        return self.column_enabled("position")

    def normals_enabled(self) -> bool:
        return self.column_enabled("normal")

    def colors_enabled(self) -> bool:
        return self.column_enabled("color")

    def bones_enabled(self) -> bool:
        """Both BONE_WEIGHT and BONE_INDEX must be set."""
        return self.column_enabled("bones")

    def tangents_enabled(self) -> bool:
        return self.column_enabled("tangent")

    def uv1_enabled(self) -> bool:
        return self.column_enabled("uv1")

    def uv2_enabled(self) -> bool:
        return self.column_enabled("uv2")

    def uv3_enabled(self) -> bool:
        return self.column_enabled("uv3")

    def uv4_enabled(self) -> bool:
        return self.column_enabled("uv4")

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def face_count(self) -> int:
        return len(self.indices)

    # ------------------------------------------------------------------
    # Codec
    # ------------------------------------------------------------------

    def read(self, io: IoBuffer):
        """Parse complete ZMS structure."""
        self.identifier = io.read_cstring()
        version = IDENTIFIERS.get(self.identifier)
        if version is None:
            raise UnsupportedVersionError(self.identifier, "read_zms_identifier")

        self.format = io.read_int32()
        self.bounding_box = io.read_bounding_box()
        logger.debug(f"ZMS: identifier={self.identifier} format={self.format:#x}")

        bone_count = _read_count(io, "bone")
        self.bones = [io.read_int16() for _ in range(bone_count)]

        vert_count = _read_count(io, "vertex")
        self.vertices = [ModelVertex() for _ in range(max(vert_count, 0))]

        for column in VERTEX_COLUMNS:
            if not column.enabled(self.format):
                continue
            for vertex in self.vertices:
                column.read(io, vertex)

        index_count = _read_count(io, "index")
        self.indices = [io.read_vector3_i16() for _ in range(index_count)]

        material_count = _read_count(io, "material")
        self.materials = [io.read_int16() for _ in range(material_count)]

        strip_count = _read_count(io, "strip")
        self.strips = [io.read_int16() for _ in range(strip_count)]

        if version >= 8:
            self.pool = io.read_int16()
        else:
            self.pool = 0

        logger.debug(
            f"ZMS: {len(self.bones)} bones, {len(self.vertices)} vertices, "
            f"{len(self.indices)} faces, {len(self.materials)} materials, "
            f"{len(self.strips)} strips"
        )

    def write(self, io: IoBuffer):
        """Write as ZMS0008 regardless of the identifier that was read."""
        for items, what in ((self.bones, "bones"), (self.vertices, "vertices"),
                            (self.indices, "indices"), (self.materials, "materials"),
                            (self.strips, "strips")):
            _check_count(items, what)

        io.write_cstring(LATEST_IDENTIFIER)
        io.write_int32(self.format)
        io.write_bounding_box(self.bounding_box)

        io.write_int16(len(self.bones))
        for bone in self.bones:
            io.write_int16(bone)

        io.write_int16(len(self.vertices))
        for column in VERTEX_COLUMNS:
            if not column.enabled(self.format):
                continue
            for vertex in self.vertices:
                column.write(io, vertex)

        io.write_int16(len(self.indices))
        for index in self.indices:
            io.write_vector3_i16(index)

        io.write_int16(len(self.materials))
        for material in self.materials:
            io.write_int16(material)

        io.write_int16(len(self.strips))
        for strip in self.strips:
            io.write_int16(strip)

        io.write_int16(self.pool)

    def summary(self) -> str:
        """Get a summary of the model."""
        return (
            f"ZMS: {self.identifier or '(new)'}\n"
            f"Format: {self.format:#x} ({', '.join(self.enabled_columns()) or 'none'})\n"
            f"Bones: {len(self.bones)}\n"
            f"Vertices: {self.vertex_count}\n"
            f"Faces: {self.face_count}"
        )


# Short alias matching the file extension
ZMS = ModelFile
