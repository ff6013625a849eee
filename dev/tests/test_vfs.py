"""
rosetools - VFS Index Codec Tests

Checks offset indirection on read, reserve/backpatch on write, deleted
counts, path normalization and the empty-archive start offset.

Can be run standalone: python test_vfs.py
Or via main runner: python tests.py --module vfs
"""

import os
import tempfile
from io import BytesIO
from pathlib import Path

from builders import expect_raises, flags, i32, str_u16

from rosetools.errors import StreamExhaustedError, SequenceTooLargeError, ValueOutOfRangeError
from rosetools.formats.vfs import (
    VfsIndex, VfsMetadata, VfsFileMetadata, read_file_data, EMPTY_START_OFFSET,
)
from rosetools.utils.binary import IoBuffer


def file_record(path: str, offset: int, size: int, deleted=False, compressed=False,
                encrypted=False, version=0, checksum=0, block_size=0) -> bytes:
    return (
        str_u16(path) + i32(offset, size, block_size)
        + flags(deleted, compressed, encrypted) + i32(version, checksum)
    )


def host(path: str) -> str:
    return path.replace("\\", os.sep)


def sample_index() -> VfsIndex:
    data_vfs = VfsMetadata("DATA.VFS", [
        VfsFileMetadata(host("3DDATA\\EFFECT\\A.EFT"), offset=100, size=10, block_size=16,
                        version=1, checksum=0x1234),
        VfsFileMetadata(host("3DDATA\\EFFECT\\B.EFT"), offset=110, size=20, is_deleted=True),
        VfsFileMetadata(host("3DDATA\\NPC\\C.ZMS"), offset=130, size=5, is_compressed=True,
                        is_encrypted=True, checksum=-7),
    ])
    map_vfs = VfsMetadata("MAP.VFS", [
        VfsFileMetadata(host("3DDATA\\TERRAIN\\TILES\\ZONETYPEINFO.STB"), offset=0, size=64,
                        is_deleted=True),
    ])
    return VfsIndex(base_version=129, current_version=130, file_systems=[data_vfs, map_vfs])


def read_header_table(data: bytes):
    """Return (base, current, [(filename, body_offset), ...]) from encoded bytes."""
    io = IoBuffer.from_bytes(data)
    base = io.read_int32()
    current = io.read_int32()
    count = io.read_int32()
    table = []
    for _ in range(count):
        name = io.read_string_u16()
        table.append((name, io.read_int32()))
    return base, current, table


# ═══════════════════════════════════════════════════════════════════════════════
# DECODE
# ═══════════════════════════════════════════════════════════════════════════════

def test_decode_follows_offsets_out_of_order():
    # Second archive's body is stored before the first one's
    header = i32(129, 129, 2) + str_u16("DATA.VFS") + i32(0) + str_u16("MAP.VFS") + i32(0)
    map_body = i32(1, 0, 7) + file_record("MAP\\Z.ZON", 7, 3)
    data_body = i32(2, 1, 40) + file_record("A\\B.TXT", 40, 4) + \
        file_record("A\\C.TXT", 44, 8, deleted=True)

    map_at = len(header)
    data_at = map_at + len(map_body)
    header = i32(129, 129, 2) + str_u16("DATA.VFS") + i32(data_at) + \
        str_u16("MAP.VFS") + i32(map_at)
    raw = header + map_body + data_body

    idx = VfsIndex.from_bytes(raw)
    assert idx.base_version == 129
    assert idx.current_version == 129
    assert [v.filename for v in idx.file_systems] == ["DATA.VFS", "MAP.VFS"]
    assert [len(v.files) for v in idx.file_systems] == [2, 1]

    entry = idx.file_systems[0].files[1]
    assert entry.filepath == os.path.join("A", "C.TXT")
    assert entry.offset == 44
    assert entry.size == 8
    assert entry.is_deleted
    assert not entry.is_compressed
    assert idx.file_systems[1].files[0].filepath == os.path.join("MAP", "Z.ZON")


def test_decode_stays_after_last_body():
    body = i32(1, 0, 0) + file_record("X", 0, 1)
    header_len = len(i32(1, 1, 1) + str_u16("ONE.VFS") + i32(0))
    raw = i32(1, 1, 1) + str_u16("ONE.VFS") + i32(header_len) + body

    io = IoBuffer.from_bytes(raw)
    VfsIndex.from_buffer(io)
    assert io.position == len(raw)


def test_decode_all_flag_bytes():
    header_len = len(i32(0, 0, 1) + str_u16("A.VFS") + i32(0))
    raw = (
        i32(0, 0, 1) + str_u16("A.VFS") + i32(header_len)
        + i32(1, 0, 9) + file_record("F", 9, 1, compressed=True, encrypted=True,
                                     version=3, checksum=-1, block_size=512)
    )
    entry = VfsIndex.from_bytes(raw).file_systems[0].files[0]
    assert (entry.is_deleted, entry.is_compressed, entry.is_encrypted) == (False, True, True)
    assert entry.version == 3
    assert entry.checksum == -1
    assert entry.block_size == 512


def test_body_offset_past_end_is_truncation():
    raw = i32(1, 1, 1) + str_u16("A.VFS") + i32(500)
    expect_raises(StreamExhaustedError, VfsIndex.from_bytes, raw)


def test_truncated_file_list():
    header_len = len(i32(1, 1, 1) + str_u16("A.VFS") + i32(0))
    raw = i32(1, 1, 1) + str_u16("A.VFS") + i32(header_len) + i32(3, 0, 0) + \
        file_record("F", 0, 1)
    expect_raises(StreamExhaustedError, VfsIndex.from_bytes, raw)


# ═══════════════════════════════════════════════════════════════════════════════
# ENCODE
# ═══════════════════════════════════════════════════════════════════════════════

def test_round_trip_preserves_everything():
    idx = sample_index()
    again = VfsIndex.from_bytes(idx.to_bytes())
    assert again == idx
    assert [len(v) for v in again] == [3, 1]


def test_backpatched_offsets_point_at_bodies():
    idx = sample_index()
    data = idx.to_bytes()
    base, current, table = read_header_table(data)
    assert (base, current) == (129, 130)
    assert [name for name, _ in table] == ["DATA.VFS", "MAP.VFS"]

    io = IoBuffer.from_bytes(data)
    for (_, offset), vfs in zip(table, idx.file_systems):
        io.seek(offset)
        file_count = io.read_int32()
        deleted_count = io.read_int32()
        start_offset = io.read_int32()
        assert file_count == len(vfs.files)
        assert deleted_count == sum(1 for f in vfs.files if f.is_deleted)
        assert start_offset == vfs.files[0].offset

    # First body directly follows the header table
    header_len = 12 + sum(2 + len(name) + 4 for name, _ in table)
    assert table[0][1] == header_len
    assert table[1][1] > table[0][1]


def test_deleted_count_after_reencode():
    idx = sample_index()
    again = VfsIndex.from_bytes(idx.to_bytes())
    assert again.file_systems[0].deleted_count == 1
    assert again.file_systems[1].deleted_count == 1


def test_empty_archive_start_offset_is_pinned():
    idx = VfsIndex(base_version=1, current_version=1, file_systems=[
        VfsMetadata("DATA.VFS", [VfsFileMetadata("A.TXT", offset=42, size=1)]),
        VfsMetadata("EMPTY.VFS", []),
    ])
    data = idx.to_bytes()

    again = VfsIndex.from_bytes(data)
    assert len(again.file_systems) == 2
    assert [len(v.files) for v in again.file_systems] == [1, 0]

    _, _, table = read_header_table(data)
    io = IoBuffer.from_bytes(data)
    io.seek(table[1][1])
    assert io.read_int32() == 0
    assert io.read_int32() == 0
    assert io.read_int32() == EMPTY_START_OFFSET == 0
    assert not io.has_more


def test_paths_written_with_archive_separator():
    idx = VfsIndex(file_systems=[
        VfsMetadata("DATA.VFS", [VfsFileMetadata(os.path.join("3DDATA", "NPC", "A.ZMS"))]),
    ])
    data = idx.to_bytes()
    assert b"3DDATA\\NPC\\A.ZMS" in data
    assert VfsIndex.from_bytes(data).file_systems[0].files[0].filepath == \
        os.path.join("3DDATA", "NPC", "A.ZMS")


def test_empty_index():
    idx = VfsIndex(base_version=5, current_version=6)
    data = idx.to_bytes()
    assert data == i32(5, 6, 0)
    assert VfsIndex.from_bytes(data) == idx


def test_save_and_load_file():
    idx = sample_index()
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "data.idx"
        idx.save(path)
        assert VfsIndex.from_path(path) == idx
        with open(path, 'rb') as f:
            assert VfsIndex.from_stream(f) == idx


def test_oversized_path_rejected_before_writing():
    idx = sample_index()
    idx.file_systems[1].files.append(VfsFileMetadata("A" * 0x10000, offset=1, size=1))

    io = IoBuffer.writer()
    err = expect_raises(SequenceTooLargeError, idx.write, io)
    assert err.limit == 0xFFFF
    assert io.getvalue() == b""

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "data.idx"
        expect_raises(SequenceTooLargeError, idx.save, path)
        assert not path.exists()


def test_out_of_range_offset_is_typed_error():
    idx = VfsIndex(file_systems=[VfsMetadata("DATA.VFS", [VfsFileMetadata("A", offset=2**31)])])
    err = expect_raises(ValueOutOfRangeError, idx.to_bytes)
    assert err.operation == "write_int32"


# ═══════════════════════════════════════════════════════════════════════════════
# LOOKUP
# ═══════════════════════════════════════════════════════════════════════════════

def test_lookup_helpers():
    idx = sample_index()
    assert idx.file_count == 4
    assert len(idx) == 2
    assert host("3DDATA\\NPC\\C.ZMS") in idx.list_files()

    found = idx.find_file("3ddata/npc/c.zms")
    assert found is not None
    vfs, entry = found
    assert vfs.filename == "DATA.VFS"
    assert entry.offset == 130

    assert "3DDATA\\NPC\\C.ZMS" in idx
    assert "3DDATA\\NPC\\MISSING.ZMS" not in idx
    assert "DATA.VFS: 3 files (1 deleted)" in idx.summary()


def test_read_file_data_returns_raw_bytes():
    blob = BytesIO(b"xxxxHELLOyyy")
    entry = VfsFileMetadata("A.TXT", offset=4, size=5, is_compressed=True)
    assert read_file_data(blob, entry) == b"HELLO"

    entry.size = 50
    expect_raises(StreamExhaustedError, read_file_data, blob, entry)


if __name__ == "__main__":
    from tests import run_modules
    raise SystemExit(run_modules(["test_vfs"]))
