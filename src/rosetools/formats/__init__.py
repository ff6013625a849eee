"""rosetools formats package - ROSE Online file format codecs."""
from .base import RoseFile
from .zms import ModelFile, ModelVertex, VertexFormat, VERTEX_COLUMNS, ZMS
from .vfs import VfsIndex, VfsMetadata, VfsFileMetadata, read_file_data
from .him import Heightmap, HIM
from .lit import Lightmap, LightmapObject, LightmapPart, LIT

__all__ = [
    'RoseFile',
    # Model
    'ModelFile', 'ModelVertex', 'VertexFormat', 'VERTEX_COLUMNS', 'ZMS',
    # Virtual file system
    'VfsIndex', 'VfsMetadata', 'VfsFileMetadata', 'read_file_data',
    # Terrain
    'Heightmap', 'HIM',
    'Lightmap', 'LightmapObject', 'LightmapPart', 'LIT',
]
