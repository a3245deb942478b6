"""
Decoding of .dan world files.

File layout (after decompression, all integers big-endian):
- Magic: u8 length + "DanWorld"
- Version: uint8
- Dimension: uint8 (0 = overworld, 1 = nether, 2 = end)
- Width, depth: uint16 each, chunk grid extents
- Chunks: width * depth entries
    - x, z: uint16 each
    - Section count: uint8
    - Sections:
        - Palette: u8 count + strings
        - Blocks: uint16 count + one palette index byte per block
        - Biomes: one biome byte per block
        - Property records: uint16 count + records (see blockdata)
- Extra table: count (width set by version) + entries (see extra)

Block positions within a section are stored in the exporter's scan
order: y outermost, then x, then z, so index = y * 256 + x * 16 + z.
"""

import gzip
import logging
import zlib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

import numpy as np

from danworld.biomes import BiomeLookup
from danworld.blockdata import BlockData, Coord, read_property_record
from danworld.cursor import ByteCursor
from danworld.errors import CorruptHeader, InvalidText, TrailingData
from danworld.extra import ExtraValue, read_extra
from danworld.formats import MAGIC, DecodeOptions, format_for_version, read_extra_count

logger = logging.getLogger(__name__)

SECTION_SIZE = 16
SECTION_VOLUME = SECTION_SIZE ** 3


class Dimension(Enum):
    OVERWORLD = 0
    NETHER = 1
    END = 2


@dataclass(frozen=True, eq=False)
class ChunkSection:
    """
    One 16-high slice of a chunk.

    `blocks` holds palette indices in scan order, `biomes` the biome of
    each of those positions. `properties` only lists positions that have
    at least one property.
    """
    palette: Tuple[str, ...]
    blocks: np.ndarray = field(repr=False)
    biomes: Tuple[Any, ...] = field(repr=False)
    properties: Mapping[Coord, Tuple[BlockData, ...]] = field(default_factory=dict)

    @staticmethod
    def block_index(x: int, y: int, z: int) -> int:
        """Scan-order index of local position (x, y, z)."""
        for name, value in (("x", x), ("y", y), ("z", z)):
            if not 0 <= value < SECTION_SIZE:
                raise ValueError(f"Local {name} must be in 0-15, got {value}")
        return y * SECTION_SIZE * SECTION_SIZE + x * SECTION_SIZE + z

    def block_name(self, x: int, y: int, z: int) -> str:
        """Palette name of the block at local position (x, y, z)."""
        return self.palette[int(self.blocks[self.block_index(x, y, z)])]

    def biome_at(self, x: int, y: int, z: int) -> Any:
        return self.biomes[self.block_index(x, y, z)]

    def properties_at(self, x: int, y: int, z: int) -> Tuple[BlockData, ...]:
        return self.properties.get((x, y, z), ())

    def block_grid(self) -> np.ndarray:
        """
        Blocks as a (16, 16, 16) array indexed [y, x, z].

        Raises:
            ValueError: If the section does not hold exactly 4096 blocks
        """
        if self.blocks.size != SECTION_VOLUME:
            raise ValueError(
                f"Section holds {self.blocks.size} blocks, expected {SECTION_VOLUME}"
            )
        return self.blocks.reshape(SECTION_SIZE, SECTION_SIZE, SECTION_SIZE)

    def palette_counts(self) -> Dict[str, int]:
        """Number of blocks using each palette entry."""
        counts = np.bincount(self.blocks, minlength=len(self.palette))
        return {
            name: int(counts[i])
            for i, name in enumerate(self.palette)
        }


@dataclass(frozen=True, eq=False)
class Chunk:
    x: int
    z: int
    sections: Tuple[ChunkSection, ...] = ()


@dataclass(frozen=True, eq=False)
class World:
    """A fully decoded world. Built once by decode_world and never changed."""
    version: int
    dimension: Dimension
    width: int
    depth: int
    chunks: Tuple[Chunk, ...] = field(repr=False, default=())
    extra: Mapping[str, ExtraValue] = field(default_factory=dict)

    def get_extra(self, key: str) -> Optional[ExtraValue]:
        return self.extra.get(key)

    def chunk_at(self, x: int, z: int) -> Optional[Chunk]:
        """Find the chunk with coordinates (x, z), or None."""
        return next((c for c in self.chunks if c.x == x and c.z == z), None)

    def iter_sections(self) -> Iterator[Tuple[Chunk, int, ChunkSection]]:
        """Yield (chunk, section index, section) in stream order."""
        for chunk in self.chunks:
            for i, section in enumerate(chunk.sections):
                yield chunk, i, section


def read_section(cursor: ByteCursor, biome_lookup: BiomeLookup) -> ChunkSection:
    """
    Read one chunk section.

    Args:
        cursor: Cursor positioned at the palette length
        biome_lookup: Maps each biome byte to a biome value

    Returns:
        Decoded ChunkSection

    Raises:
        UnexpectedEnd: If the section is cut short
        InvalidText: If a palette name is not valid UTF-8
    """
    palette_len = cursor.read_u8()
    palette = tuple(cursor.read_string() for _ in range(palette_len))

    num_blocks = cursor.read_u16()
    blocks = np.frombuffer(cursor.read(num_blocks), dtype=np.uint8)
    biomes = tuple(biome_lookup(code) for code in cursor.read(num_blocks))

    num_records = cursor.read_u16()
    properties: Dict[Coord, Tuple[BlockData, ...]] = {}
    for _ in range(num_records):
        coord, values = read_property_record(cursor)
        if values:
            properties[coord] = values

    return ChunkSection(
        palette=palette,
        blocks=blocks,
        biomes=biomes,
        properties=MappingProxyType(properties),
    )


def read_chunk(cursor: ByteCursor, biome_lookup: BiomeLookup) -> Chunk:
    """Read a chunk header and its sections, keeping stream order."""
    x = cursor.read_u16()
    z = cursor.read_u16()
    num_sections = cursor.read_u8()
    sections = tuple(read_section(cursor, biome_lookup) for _ in range(num_sections))
    return Chunk(x=x, z=z, sections=sections)


def _read_magic(cursor: ByteCursor) -> None:
    start = cursor.position
    try:
        magic = cursor.read_string()
    except InvalidText:
        raise CorruptHeader("Invalid magic: not a DanWorld file", start) from None
    if magic != MAGIC:
        raise CorruptHeader(f"Invalid magic: {magic!r}, expected {MAGIC!r}", start)


def read_world(cursor: ByteCursor, options: Optional[DecodeOptions] = None) -> World:
    """
    Read a whole world from a cursor over decompressed data.

    Raises:
        CorruptHeader: If the magic string is wrong
        UnsupportedVersion: If the version has no known extra table layout
        UnexpectedEnd: If the data is cut short anywhere
        InvalidText: If a string is not valid UTF-8
        TrailingData: If options.strict is set and bytes are left over
    """
    options = options or DecodeOptions()
    options.validate()

    _read_magic(cursor)
    version = cursor.read_u8()
    fmt = format_for_version(version, options)

    dim_code = cursor.read_u8()
    try:
        dimension = Dimension(dim_code)
    except ValueError:
        logger.debug("Unknown dimension code %d, using overworld", dim_code)
        dimension = Dimension.OVERWORLD

    width = cursor.read_u16()
    depth = cursor.read_u16()
    logger.debug(
        "DanWorld v%d, %s, %dx%d chunks", version, dimension.name.lower(), width, depth
    )

    chunks = tuple(read_chunk(cursor, options.biome_lookup) for _ in range(width * depth))

    num_extra = read_extra_count(cursor, fmt)
    extra: Dict[str, ExtraValue] = {}
    for _ in range(num_extra):
        key, value = read_extra(cursor)
        if key in extra:
            logger.debug("Duplicate extra key %r, keeping the later value", key)
        extra[key] = value
    logger.debug("Read %d extra entries", num_extra)

    if not cursor.at_end():
        if options.strict:
            raise TrailingData(
                f"{cursor.remaining} bytes left after extra table", cursor.position
            )
        logger.debug("Ignoring %d trailing bytes", cursor.remaining)

    return World(
        version=version,
        dimension=dimension,
        width=width,
        depth=depth,
        chunks=chunks,
        extra=MappingProxyType(extra),
    )


def decode_world(
    data: Union[bytes, bytearray, memoryview],
    options: Optional[DecodeOptions] = None,
) -> World:
    """
    Decode a world from decompressed bytes.

    Example:
        >>> world = decode_world(raw_bytes)
        >>> world.dimension
        <Dimension.OVERWORLD: 0>
    """
    return read_world(ByteCursor(data), options)


def decompress(data: bytes, compression: Optional[str] = "gzip") -> bytes:
    """Undo the file-level compression ("gzip", "zlib" or None)."""
    if compression is None:
        return data
    if compression == "gzip":
        return gzip.decompress(data)
    if compression == "zlib":
        return zlib.decompress(data)
    raise ValueError(f"Unknown compression type: {compression!r}")


def load_world(
    path: Union[str, Path],
    options: Optional[DecodeOptions] = None,
) -> World:
    """
    Read, decompress and decode a .dan file.

    Args:
        path: Path to the .dan file
        options: Decode options (gzip compression by default)

    Returns:
        The decoded World

    Raises:
        DanWorldError: If the decompressed data is not a valid world
        OSError: If the file cannot be read or is not valid gzip
    """
    path = Path(path)
    options = options or DecodeOptions()
    options.validate()

    raw = path.read_bytes()
    logger.debug("Loading %s (%d bytes, compression=%s)", path, len(raw), options.compression)
    return decode_world(decompress(raw, options.compression), options)


def get_world_info(world: World) -> Dict[str, Any]:
    """
    Summarize a world.

    Returns:
        Dict with header fields, chunk/section/block totals, the set of
        block names in use and the extra keys with their sizes
    """
    num_sections = 0
    num_blocks = 0
    num_records = 0
    block_names = set()
    for _, _, section in world.iter_sections():
        num_sections += 1
        num_blocks += int(section.blocks.size)
        num_records += len(section.properties)
        block_names.update(
            name for name, count in section.palette_counts().items() if count
        )

    return {
        "version": world.version,
        "dimension": world.dimension.name.lower(),
        "width": world.width,
        "depth": world.depth,
        "chunks": len(world.chunks),
        "sections": num_sections,
        "blocks": num_blocks,
        "property_blocks": num_records,
        "block_names": sorted(block_names),
        "extra": {key: len(value) for key, value in sorted(world.extra.items())},
    }
