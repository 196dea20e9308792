import struct

import pytest


def pack_name(name):
    if not name:
        return struct.pack(">H", 0)
    text = name + "\0"
    return struct.pack(">H", len(text)) + text.encode("utf_16_be")


def color_block(name, space, values, color_type=2):
    payload = pack_name(name) + space + struct.pack(f">{len(values)}f", *values) + struct.pack(">H", color_type)
    return struct.pack(">Hi", 0x0001, len(payload)) + payload


def group_start_block(name_bytes):
    payload = struct.pack(">H", len(name_bytes)) + name_bytes
    return struct.pack(">Hi", 0xc001, len(payload)) + payload


def group_end_block():
    return struct.pack(">Hi", 0xc002, 0)


def ase_file(*blocks, count=None, version=(1, 0), signature=b"ASEF"):
    if count is None:
        count = len(blocks)
    return signature + struct.pack(">HHi", version[0], version[1], count) + b"".join(blocks)


@pytest.fixture
def sample_palette():
    return ase_file(
        color_block("Ink Black", b"CMYK", (0, 0, 0, 1), 0),
        group_start_block(b"abcde"),
        color_block("Sky", b"RGB ", (10, 20, 30), 2),
        group_end_block(),
        color_block("Mid Gray", b"GRAY", (0.5,), 1),
    )


@pytest.fixture
def ase_path(tmp_path, sample_palette):
    path = tmp_path / "brand.ase"
    path.write_bytes(sample_palette)
    return path
