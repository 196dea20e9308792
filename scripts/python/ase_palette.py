"""Adobe Swatch Exchange (.ase) decoding.

Reads the ASEF header and walks the block list, turning every Color block into
an immutable ColorRecord. Group blocks are skipped. Everything is big-endian.
"""

import enum
import io
import logging
import struct
from dataclasses import dataclass
from functools import cached_property

logger = logging.getLogger(__name__)

ASE_SIGNATURE = b"ASEF"
ASE_VERSION = (1, 0)
HEADER_SIZE = 12

BLOCK_COLOR = 0x0001
BLOCK_GROUP_START = 0xc001
BLOCK_GROUP_END = 0xc002


class AseDecodeError(Exception):
    """Base class for everything that aborts an ASE import."""


class TruncatedFileError(AseDecodeError):
    def __init__(self, expected, got, offset):
        self.expected = expected
        self.got = got
        self.offset = offset
        super().__init__(f"ASE file truncated at offset {offset}: expected {expected} bytes, got {got}")


class InvalidHeaderError(AseDecodeError):
    def __init__(self, signature):
        self.signature = signature
        super().__init__(f"Invalid file header {signature!r}, expected {ASE_SIGNATURE!r}")


class UnsupportedVersionError(AseDecodeError):
    def __init__(self, major, minor):
        self.version = (major, minor)
        super().__init__(f"Invalid file version {major}.{minor}, only 1.0 is supported")


class InvalidBlockTypeError(AseDecodeError):
    def __init__(self, code):
        self.code = code
        super().__init__(f"Invalid block type {code:#06x}")


class InvalidColorSpaceError(AseDecodeError):
    def __init__(self, tag):
        self.tag = tag
        super().__init__(f"Invalid colorspace: {tag!r}")


class UnsupportedColorSpaceError(AseDecodeError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"{name} conversion not yet supported")


class InvalidColorTypeError(AseDecodeError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid color type {value}")


class ColorSpace(enum.Enum):
    CMYK = "CMYK"
    RGB = "RGB "
    LAB = "LAB "
    GRAY = "GRAY"

    @property
    def arity(self):
        return _ARITY[self]

    @property
    def label(self):
        return self.value.strip()


_ARITY = {
    ColorSpace.CMYK: 4,
    ColorSpace.RGB: 3,
    ColorSpace.LAB: 3,
    ColorSpace.GRAY: 1,
}


class ColorType(enum.IntEnum):
    GLOBAL = 0
    SPOT = 1
    NORMAL = 2


@dataclass(frozen=True)
class ColorRecord:
    """One decoded swatch. `rgba` is computed on first access and kept."""

    name: str
    color_space: ColorSpace
    values: tuple
    color_type: ColorType

    def __post_init__(self):
        if len(self.values) != self.color_space.arity:
            raise ValueError(
                f"{self.color_space.label} expects {self.color_space.arity} values, got {len(self.values)}"
            )

    @cached_property
    def rgba(self):
        v = self.values
        if self.color_space is ColorSpace.CMYK:
            k = 1 - v[3]
            return (255 * (1 - v[0]) * k, 255 * (1 - v[1]) * k, 255 * (1 - v[2]) * k, 1.0)
        if self.color_space is ColorSpace.RGB:
            return (v[0], v[1], v[2], 1.0)
        if self.color_space is ColorSpace.GRAY:
            return (v[0], v[0], v[0], 1.0)
        raise UnsupportedColorSpaceError(self.color_space.label)

    @property
    def display_rgb(self):
        # CMYK rgba comes out on a 0..255 scale, RGB and GRAY are passed through
        r, g, b, _ = self.rgba
        if self.color_space is ColorSpace.CMYK:
            r, g, b = r / 255, g / 255, b / 255
        return tuple(min(1.0, max(0.0, c)) for c in (r, g, b))


class BlockReader:
    """Big-endian reads over a binary stream, tracking the byte offset."""

    def __init__(self, stream):
        self.stream = stream
        self.pos = 0

    def read(self, size):
        data = self.stream.read(size)
        if len(data) != size:
            raise TruncatedFileError(size, len(data), self.pos)
        self.pos += size
        return data

    def read_u16(self):
        return struct.unpack(">H", self.read(2))[0]

    def read_i32(self):
        return struct.unpack(">i", self.read(4))[0]

    def read_f32(self):
        return struct.unpack(">f", self.read(4))[0]

    def read_utf16(self, length):
        if length == 0:
            return ""
        raw = self.read(length * 2)
        return raw.decode("utf_16_be", errors="replace").rstrip("\0")

    def skip(self, size):
        if size > 0:
            self.read(size)


def read_color(reader):
    """Decode the payload of a Color block."""
    name = reader.read_utf16(reader.read_u16())

    tag = reader.read(4)
    try:
        color_space = ColorSpace(tag.decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        raise InvalidColorSpaceError(tag.decode("ascii", errors="replace")) from None

    values = tuple(reader.read_f32() for _ in range(color_space.arity))

    type_code = reader.read_u16()
    try:
        color_type = ColorType(type_code)
    except ValueError:
        raise InvalidColorTypeError(type_code) from None

    return ColorRecord(name, color_space, values, color_type)


def read_header(reader):
    try:
        header = reader.read(HEADER_SIZE)
    except TruncatedFileError as e:
        raise TruncatedFileError(HEADER_SIZE, e.got, 0) from None

    if header[0:4] != ASE_SIGNATURE:
        raise InvalidHeaderError(header[0:4])

    major, minor, block_count = struct.unpack(">HHi", header[4:12])
    if (major, minor) != ASE_VERSION:
        raise UnsupportedVersionError(major, minor)
    return block_count


def decode(data):
    """Decode an ASE document into an ordered list of ColorRecord.

    `data` is either the raw bytes or a readable binary stream at offset 0.
    The first problem raises an AseDecodeError; nothing is returned partially.
    """
    stream = io.BytesIO(data) if isinstance(data, (bytes, bytearray, memoryview)) else data
    reader = BlockReader(stream)

    block_count = read_header(reader)
    if block_count < 0:
        logger.warning("Negative block count %d, treating file as empty", block_count)
    logger.debug("ASE block count: %d", block_count)

    colors = []
    for index in range(block_count):
        block_type = reader.read_u16()
        block_len = reader.read_i32()
        start = reader.pos

        if block_type == BLOCK_COLOR:
            color = read_color(reader)
            if color.color_space is ColorSpace.LAB:
                raise UnsupportedColorSpaceError(color.color_space.label)
            if reader.pos - start != block_len:
                logger.debug("Block %d declared %d bytes, color used %d", index, block_len, reader.pos - start)
            logger.debug("%s swatch: %r %s", color.color_space.label, color.name, color.values)
            colors.append(color)
        elif block_type == BLOCK_GROUP_START:
            # group names are not kept, only stepped over
            reader.skip(reader.read_u16())
            logger.debug("Skipping group start at block %d", index)
        elif block_type == BLOCK_GROUP_END:
            pass
        else:
            raise InvalidBlockTypeError(block_type)

    logger.info("Decoded %d swatches", len(colors))
    return colors


def load_ase(path):
    with open(path, "rb") as f:
        return decode(f)
