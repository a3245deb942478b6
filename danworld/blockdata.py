"""
Block property decoding.

Each block property is packed into one unsigned 16-bit value:

- Bits 15-12: property type tag (0-14 defined, 15 unused)
- Bits 11-0:  payload, interpreted per tag

A property record groups the properties of one block:

- Header (u16): x in bits 15-12, y in bits 11-8, z in bits 7-4,
  property count in bits 3-0
- Followed by `count` packed property values (u16 each)

Unknown payload codes never fail; each field has a fixed fallback so that
files written by newer exporters still load. An unknown tag decodes to
None and is dropped from its record.

Tag  Kind             Payload
  0  ORIENTATION      2 bits  -> Axis (00=X, 01=Y, 11=Z, 10 falls back to Y)
  1  AGE              8 bits  -> int
  2  SNOW_LEVEL       8 bits  -> int
  3  LIQUID_LEVEL     8 bits  -> int
  4  BISECTED         1 bit   -> Half
  5  DIRECTION        5 bits  -> Direction (18+ falls back to NORTH)
  6  WATERLOGGED      1 bit   -> bool
  7  ROTATION         5 bits  -> Direction
  8  MULTIPLE_FACING  6 flags -> tuple of Direction (N, S, E, W, Up, Down)
  9  OPEN             1 bit   -> bool
 10  RAIL_SHAPE       4 bits  -> RailShape (10+ falls back to EAST_WEST)
 11  STAIR_SHAPE      3 bits  -> StairShape (5+ falls back to STRAIGHT)
 12  ATTACHED         1 bit   -> bool
 13  HINGE            1 bit   -> Side
 14  FARMLAND         8 bits  -> int
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from danworld.cursor import ByteCursor

TYPE_MASK = 0xF000
PAYLOAD_MASK = 0x0FFF
TYPE_SHIFT = 12

COORD_MASK = 0xF
COUNT_MASK = 0xF

Coord = Tuple[int, int, int]


class Axis(Enum):
    X = 0
    Y = 1
    Z = 3


class Half(Enum):
    TOP = 0
    BOTTOM = 1


class Side(Enum):
    LEFT = 0
    RIGHT = 1


class Direction(Enum):
    DOWN = 0
    EAST = 1
    EAST_NORTH_EAST = 2
    EAST_SOUTH_EAST = 3
    NORTH = 4
    NORTH_EAST = 5
    NORTH_NORTH_EAST = 6
    NORTH_NORTH_WEST = 7
    NORTH_WEST = 8
    SOUTH = 9
    SOUTH_EAST = 10
    SOUTH_SOUTH_EAST = 11
    SOUTH_SOUTH_WEST = 12
    SOUTH_WEST = 13
    UP = 14
    WEST = 15
    WEST_NORTH_WEST = 16
    WEST_SOUTH_WEST = 17


class RailShape(Enum):
    ASCENDING_EAST = 0
    ASCENDING_NORTH = 1
    ASCENDING_SOUTH = 2
    ASCENDING_WEST = 3
    EAST_WEST = 4
    NORTH_EAST = 5
    NORTH_SOUTH = 6
    NORTH_WEST = 7
    SOUTH_EAST = 8
    SOUTH_WEST = 9


class StairShape(Enum):
    INNER_LEFT = 0
    INNER_RIGHT = 1
    OUTER_LEFT = 2
    OUTER_RIGHT = 3
    STRAIGHT = 4


class PropertyKind(Enum):
    """Property type, valued by its 4-bit tag."""
    ORIENTATION = 0
    AGE = 1
    SNOW_LEVEL = 2
    LIQUID_LEVEL = 3
    BISECTED = 4
    DIRECTION = 5
    WATERLOGGED = 6
    ROTATION = 7
    MULTIPLE_FACING = 8
    OPEN = 9
    RAIL_SHAPE = 10
    STAIR_SHAPE = 11
    ATTACHED = 12
    HINGE = 13
    FARMLAND = 14


# Flag bit i of a MULTIPLE_FACING payload -> face
FACING_BITS = (
    Direction.NORTH,
    Direction.SOUTH,
    Direction.EAST,
    Direction.WEST,
    Direction.UP,
    Direction.DOWN,
)


@dataclass(frozen=True)
class BlockData:
    """
    One decoded block property.

    `kind` says which property this is; `value` holds its payload:
    an Axis, Half, Side, Direction, RailShape or StairShape member, an
    int 0-255, a bool, or a tuple of Direction for MULTIPLE_FACING.
    """
    kind: PropertyKind
    value: Any

    def __repr__(self) -> str:
        return f"BlockData({self.kind.name}, {self.value!r})"


def _axis(payload: int) -> Axis:
    bits = payload & 0b11
    if bits == 0b10:
        return Axis.Y
    return Axis(bits)


def _byte(payload: int) -> int:
    return payload & 0xFF


def _flag(payload: int) -> bool:
    return payload & 1 == 1


def _direction(payload: int) -> Direction:
    code = payload & 0b11111
    if code > Direction.WEST_SOUTH_WEST.value:
        return Direction.NORTH
    return Direction(code)


def _facing(payload: int) -> Tuple[Direction, ...]:
    return tuple(face for bit, face in enumerate(FACING_BITS) if payload & (1 << bit))


def _rail_shape(payload: int) -> RailShape:
    code = payload & 0b1111
    if code > RailShape.SOUTH_WEST.value:
        return RailShape.EAST_WEST
    return RailShape(code)


def _stair_shape(payload: int) -> StairShape:
    code = payload & 0b111
    if code > StairShape.STRAIGHT.value:
        return StairShape.STRAIGHT
    return StairShape(code)


_PAYLOAD_DECODERS: Dict[PropertyKind, Callable[[int], Any]] = {
    PropertyKind.ORIENTATION: _axis,
    PropertyKind.AGE: _byte,
    PropertyKind.SNOW_LEVEL: _byte,
    PropertyKind.LIQUID_LEVEL: _byte,
    PropertyKind.BISECTED: lambda payload: Half(payload & 1),
    PropertyKind.DIRECTION: _direction,
    PropertyKind.WATERLOGGED: _flag,
    PropertyKind.ROTATION: _direction,
    PropertyKind.MULTIPLE_FACING: _facing,
    PropertyKind.OPEN: _flag,
    PropertyKind.RAIL_SHAPE: _rail_shape,
    PropertyKind.STAIR_SHAPE: _stair_shape,
    PropertyKind.ATTACHED: _flag,
    PropertyKind.HINGE: lambda payload: Side(payload & 1),
    PropertyKind.FARMLAND: _byte,
}

_KINDS_BY_TAG = {kind.value: kind for kind in PropertyKind}


def decode_property(bits: int) -> Optional[BlockData]:
    """
    Decode one packed 16-bit property value.

    Args:
        bits: Packed property (only the low 16 bits are used)

    Returns:
        The decoded BlockData, or None for an unassigned tag

    Example:
        >>> decode_property(0x5009)
        BlockData(DIRECTION, <Direction.SOUTH: 9>)
    """
    bits &= 0xFFFF
    kind = _KINDS_BY_TAG.get((bits & TYPE_MASK) >> TYPE_SHIFT)
    if kind is None:
        return None
    return BlockData(kind, _PAYLOAD_DECODERS[kind](bits & PAYLOAD_MASK))


def decode_record_header(bits: int) -> Tuple[int, int, int, int]:
    """
    Split a property record header into (x, y, z, count).

    Each field is 4 bits wide, so coordinates are 0-15 and at most 15
    properties follow a header.
    """
    bits &= 0xFFFF
    x = (bits >> 12) & COORD_MASK
    y = (bits >> 8) & COORD_MASK
    z = (bits >> 4) & COORD_MASK
    count = bits & COUNT_MASK
    return x, y, z, count


def read_property_record(cursor: ByteCursor) -> Tuple[Coord, Tuple[BlockData, ...]]:
    """
    Read one property record from the cursor.

    Exactly `count` packed values are consumed whatever they decode to;
    values with an unassigned tag are left out of the result, which may
    therefore be empty.

    Args:
        cursor: Cursor positioned at a record header

    Returns:
        Tuple of ((x, y, z), decoded properties)

    Raises:
        UnexpectedEnd: If the record is cut short
    """
    x, y, z, count = decode_record_header(cursor.read_u16())
    properties = []
    for _ in range(count):
        prop = decode_property(cursor.read_u16())
        if prop is not None:
            properties.append(prop)
    return (x, y, z), tuple(properties)
