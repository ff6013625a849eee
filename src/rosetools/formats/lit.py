"""
LIT Lightmap - ROSE Online pre-baked lighting placement

Structure:
  - Object count (int32)
  - Objects:
    - Part count (int32)
    - Object id (int32)
    - Parts:
      - Name (uint8 length-prefixed string)
      - Part id (int32)
      - DDS filename (uint8 length-prefixed string)
      - Lightmap index, pixels per part, parts per width, part position (int32)
  - Filename count (int32)
  - Filenames (uint8 length-prefixed strings)
"""

import logging
from dataclasses import dataclass, field
from typing import List

from ..utils.binary import IoBuffer
from .base import RoseFile


logger = logging.getLogger(__name__)


@dataclass
class LightmapPart:
    """Placement of one object part inside a lightmap texture."""
    name: str = ""
    id: int = -1
    filename: str = ""
    lightmap_index: int = -1
    pixels_per_part: int = 0
    parts_per_width: int = 0
    part_position: int = -1


@dataclass
class LightmapObject:
    id: int = -1
    parts: List[LightmapPart] = field(default_factory=list)


@dataclass
class Lightmap(RoseFile):
    """Lightmap placement table for the objects of one map tile."""
    objects: List[LightmapObject] = field(default_factory=list)
    filenames: List[str] = field(default_factory=list)

    def read(self, io: IoBuffer):
        self.objects = []
        object_count = io.read_int32()
        for _ in range(object_count):
            obj = LightmapObject()
            part_count = io.read_int32()
            obj.id = io.read_int32()

            for _ in range(part_count):
                part = LightmapPart()
                part.name = io.read_string_u8()
                part.id = io.read_int32()
                part.filename = io.read_string_u8()
                part.lightmap_index = io.read_int32()
                part.pixels_per_part = io.read_int32()
                part.parts_per_width = io.read_int32()
                part.part_position = io.read_int32()
                obj.parts.append(part)

            self.objects.append(obj)

        file_count = io.read_int32()
        self.filenames = [io.read_string_u8() for _ in range(file_count)]

        logger.debug(f"LIT: {len(self.objects)} objects, {len(self.filenames)} textures")

    def write(self, io: IoBuffer):
        io.write_int32(len(self.objects))
        for obj in self.objects:
            io.write_int32(len(obj.parts))
            io.write_int32(obj.id)

            for part in obj.parts:
                io.write_string_u8(part.name)
                io.write_int32(part.id)
                io.write_string_u8(part.filename)
                io.write_int32(part.lightmap_index)
                io.write_int32(part.pixels_per_part)
                io.write_int32(part.parts_per_width)
                io.write_int32(part.part_position)

        io.write_int32(len(self.filenames))
        for filename in self.filenames:
            io.write_string_u8(filename)


# Short alias matching the file extension
LIT = Lightmap
