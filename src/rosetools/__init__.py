"""
rosetools - codecs for ROSE Online asset formats.

Usage:
    from rosetools import ModelFile, VfsIndex

    model = ModelFile.from_path("HEADBAD01.ZMS")
    idx = VfsIndex.from_path("data.idx")
    print(idx.summary())
"""

__version__ = "0.1.0"

from .errors import (
    RoseError, StreamExhaustedError, UnsupportedVersionError, SequenceTooLargeError,
    ValueOutOfRangeError,
)
from .config import CodecConfig, get_config, set_config, reset_config, load_config, save_config
from .utils import IoBuffer
from .formats import (
    RoseFile,
    ModelFile, ModelVertex, VertexFormat, ZMS,
    VfsIndex, VfsMetadata, VfsFileMetadata, read_file_data,
    Heightmap, HIM,
    Lightmap, LightmapObject, LightmapPart, LIT,
)

__all__ = [
    'RoseError', 'StreamExhaustedError', 'UnsupportedVersionError', 'SequenceTooLargeError',
    'ValueOutOfRangeError',
    'CodecConfig', 'get_config', 'set_config', 'reset_config', 'load_config', 'save_config',
    'IoBuffer',
    'RoseFile',
    'ModelFile', 'ModelVertex', 'VertexFormat', 'ZMS',
    'VfsIndex', 'VfsMetadata', 'VfsFileMetadata', 'read_file_data',
    'Heightmap', 'HIM',
    'Lightmap', 'LightmapObject', 'LightmapPart', 'LIT',
]
