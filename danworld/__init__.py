"""
DanWorld - decoder for .dan voxel world exports.

.dan files are gzip-compressed and contain:
- A "DanWorld" magic string, version, dimension and chunk grid size
- Chunks of 16-high sections with a block palette, block ids, biomes
  and sparse per-block properties
- A table of named extra values (spawn positions, strings)
"""

__version__ = "0.1.0"

from danworld.errors import (
    DanWorldError,
    UnexpectedEnd,
    InvalidText,
    CorruptHeader,
    TruncatedPayload,
    UnsupportedVersion,
    TrailingData,
)
from danworld.blockdata import BlockData, PropertyKind, decode_property
from danworld.extra import ExtraValue, Position
from danworld.formats import DecodeOptions
from danworld.world import World, Chunk, ChunkSection, Dimension, decode_world, load_world

__all__ = [
    "DanWorldError",
    "UnexpectedEnd",
    "InvalidText",
    "CorruptHeader",
    "TruncatedPayload",
    "UnsupportedVersion",
    "TrailingData",
    "BlockData",
    "PropertyKind",
    "decode_property",
    "ExtraValue",
    "Position",
    "DecodeOptions",
    "World",
    "Chunk",
    "ChunkSection",
    "Dimension",
    "decode_world",
    "load_world",
]
