"""
VFS Index - ROSE Online virtual file system index (.idx)

Assets ship packed into binary blobs (.vfs). The index holds only metadata:
one entry per blob, each listing the files packed inside it with their
offset, size and flags.

Structure:
  - Base version (int32)
  - Current version (int32)
  - Archive count (int32)
  - Header table, per archive:
    - Filename (uint16 length-prefixed string)
    - Body offset (int32) -> absolute position of that archive's body
  - Bodies (at their offsets):
    - File count (int32)
    - Deleted count (int32)
    - Start offset (int32, first file's offset)
    - Entries:
      - Path (uint16 length-prefixed, backslash separated)
      - Offset, size, block size (int32)
      - Deleted, compressed, encrypted (1 byte each)
      - Version, checksum (int32)

Reading follows each body offset and returns to the header table before the
next archive. Writing reserves each body offset with a placeholder, writes
the bodies, and patches the placeholders once the positions are known.
Compressed/encrypted flags are recorded only; payloads are never transformed.
"""

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Iterator, List, Optional, Tuple

from ..utils.binary import IoBuffer, U16_MAX, check_prefixed
from ..utils.paths import from_rose_path, to_rose_path
from .base import RoseFile


logger = logging.getLogger(__name__)


# Header start-offset value written for an archive with no files
EMPTY_START_OFFSET = 0


@dataclass
class VfsFileMetadata:
    """A single file entry in a VFS archive."""
    filepath: str = ""  # host separators
    offset: int = 0
    size: int = 0
    block_size: int = 0
    is_deleted: bool = False
    is_compressed: bool = False
    is_encrypted: bool = False
    version: int = 0
    checksum: int = 0

    def read(self, io: IoBuffer):
        self.filepath = from_rose_path(io.read_string_u16())
        self.offset = io.read_int32()
        self.size = io.read_int32()
        self.block_size = io.read_int32()
        self.is_deleted = io.read_bool()
        self.is_compressed = io.read_bool()
        self.is_encrypted = io.read_bool()
        self.version = io.read_int32()
        self.checksum = io.read_int32()

    def write(self, io: IoBuffer):
        io.write_string_u16(to_rose_path(self.filepath))
        io.write_int32(self.offset)
        io.write_int32(self.size)
        io.write_int32(self.block_size)
        io.write_bool(self.is_deleted)
        io.write_bool(self.is_compressed)
        io.write_bool(self.is_encrypted)
        io.write_int32(self.version)
        io.write_int32(self.checksum)


@dataclass
class VfsMetadata:
    """Metadata for one archive blob (usually one .vfs file on disk)."""
    filename: str = ""
    files: List[VfsFileMetadata] = field(default_factory=list)

    @property
    def deleted_count(self) -> int:
        return sum(1 for f in self.files if f.is_deleted)

    @property
    def start_offset(self) -> int:
        """Offset of the first file, as recorded in the body header."""
        if not self.files:
            return EMPTY_START_OFFSET
        return self.files[0].offset

    def read_body(self, io: IoBuffer):
        file_count = io.read_int32()
        deleted_count = io.read_int32()
        start_offset = io.read_int32()
        logger.debug(
            f"VFS: {self.filename}: {file_count} files, {deleted_count} deleted, "
            f"start offset {start_offset}"
        )

        self.files = []
        for _ in range(file_count):
            entry = VfsFileMetadata()
            entry.read(io)
            self.files.append(entry)

        if self.files and start_offset != self.files[0].offset:
            logger.warning(
                f"VFS: {self.filename}: start offset {start_offset} does not match "
                f"first file offset {self.files[0].offset}"
            )

    def write_body(self, io: IoBuffer):
        io.write_int32(len(self.files))
        io.write_int32(self.deleted_count)
        io.write_int32(self.start_offset)
        for entry in self.files:
            entry.write(io)

    def __iter__(self) -> Iterator[VfsFileMetadata]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)


@dataclass
class VfsIndex(RoseFile):
    """
    Virtual file system index.

    Usage:
        idx = VfsIndex.from_path("data.idx")
        for vfs in idx.file_systems:
            for entry in vfs.files:
                print(vfs.filename, entry.filepath)

    Writing needs a seekable stream (save() and to_bytes() both provide one).
    """
    base_version: int = 0
    current_version: int = 0
    file_systems: List[VfsMetadata] = field(default_factory=list)

    def read(self, io: IoBuffer):
        """Read the index, following each archive's body offset."""
        self.base_version = io.read_int32()
        self.current_version = io.read_int32()

        vfs_count = io.read_int32()
        logger.debug(
            f"VFS: index v{self.base_version}/{self.current_version}, {vfs_count} archives"
        )

        self.file_systems = []
        for i in range(vfs_count):
            vfs = VfsMetadata()
            vfs.filename = io.read_string_u16()

            body_offset = io.read_int32()
            next_header = io.position

            io.seek(body_offset)
            vfs.read_body(io)
            self.file_systems.append(vfs)

            if i < vfs_count - 1:
                io.seek(next_header)

    def check_strings(self):
        """Raise SequenceTooLargeError if any filename or path won't fit its u16 prefix."""
        for vfs in self.file_systems:
            check_prefixed(vfs.filename, U16_MAX, "write_string_u16")
            for entry in vfs.files:
                check_prefixed(to_rose_path(entry.filepath), U16_MAX, "write_string_u16")

    def write(self, io: IoBuffer):
        """Write the index using reserve/backpatch for the body offsets."""
        self.check_strings()

        io.write_int32(self.base_version)
        io.write_int32(self.current_version)
        io.write_int32(len(self.file_systems))

        # Phase 1: header table with placeholder offsets
        placeholders: List[int] = []
        for vfs in self.file_systems:
            io.write_string_u16(vfs.filename)
            placeholders.append(io.position)
            io.write_int32(0)

        # Phase 2: bodies, patching each placeholder as its position becomes known
        for vfs, placeholder in zip(self.file_systems, placeholders):
            body_offset = io.position

            io.seek(placeholder)
            io.write_int32(body_offset)
            io.seek(body_offset)

            vfs.write_body(io)
            logger.debug(f"VFS: wrote {vfs.filename} body at {body_offset}")

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    @property
    def file_count(self) -> int:
        return sum(len(vfs.files) for vfs in self.file_systems)

    def iter_files(self) -> Iterator[Tuple[VfsMetadata, VfsFileMetadata]]:
        """Yield (archive, entry) for every file in the index."""
        for vfs in self.file_systems:
            for entry in vfs.files:
                yield vfs, entry

    def find_file(self, filepath: str) -> Optional[Tuple[VfsMetadata, VfsFileMetadata]]:
        """Find an entry by path (either separator style, case-insensitive)."""
        wanted = to_rose_path(filepath).upper()
        for vfs, entry in self.iter_files():
            if to_rose_path(entry.filepath).upper() == wanted:
                return vfs, entry
        return None

    def list_files(self) -> List[str]:
        """Get list of all file paths in the index."""
        return [entry.filepath for _, entry in self.iter_files()]

    def __iter__(self) -> Iterator[VfsMetadata]:
        return iter(self.file_systems)

    def __len__(self) -> int:
        return len(self.file_systems)

    def __contains__(self, filepath: str) -> bool:
        return self.find_file(filepath) is not None

    def summary(self) -> str:
        """Get a summary of the index."""
        lines = [
            f"VFS index: version {self.base_version}/{self.current_version}",
            f"Archives: {len(self)}",
        ]
        for vfs in self.file_systems:
            total_size = sum(f.size for f in vfs.files)
            lines.append(
                f"  {vfs.filename}: {len(vfs)} files "
                f"({vfs.deleted_count} deleted), {total_size:,} bytes"
            )
        return "\n".join(lines)


def read_file_data(stream: BinaryIO, entry: VfsFileMetadata) -> bytes:
    """
    Read the raw bytes of one entry from an opened archive blob.

    The bytes are returned as stored: compressed or encrypted entries are
    not decoded.
    """
    io = IoBuffer(stream)
    io.seek(entry.offset)
    return io.read_bytes(entry.size)
