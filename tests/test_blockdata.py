"""Tests for blockdata.py - packed block property decoding."""

import pytest

from danworld.blockdata import (
    Axis, Half, Side, Direction, RailShape, StairShape, PropertyKind, BlockData,
    decode_property, decode_record_header, read_property_record,
)
from danworld.cursor import ByteCursor
from danworld.errors import UnexpectedEnd

from world_bytes import u16


def prop(tag, payload):
    return (tag << 12) | payload


class TestDecodeProperty:
    """Test each property tag."""

    def test_orientation(self):
        assert decode_property(0x0000) == BlockData(PropertyKind.ORIENTATION, Axis.X)
        assert decode_property(0x0001).value is Axis.Y
        assert decode_property(0x0003).value is Axis.Z

    def test_orientation_invalid_code_falls_back_to_y(self):
        assert decode_property(0x0002).value is Axis.Y

    def test_orientation_ignores_high_payload_bits(self):
        assert decode_property(0x0FF0).value is Axis.X
        assert decode_property(0x0FF3).value is Axis.Z

    @pytest.mark.parametrize("tag,kind", [
        (1, PropertyKind.AGE),
        (2, PropertyKind.SNOW_LEVEL),
        (3, PropertyKind.LIQUID_LEVEL),
        (14, PropertyKind.FARMLAND),
    ])
    def test_byte_values(self, tag, kind):
        assert decode_property(prop(tag, 0x00)) == BlockData(kind, 0)
        assert decode_property(prop(tag, 0x07)) == BlockData(kind, 7)
        assert decode_property(prop(tag, 0xFF)) == BlockData(kind, 255)
        assert decode_property(prop(tag, 0xF07)) == BlockData(kind, 7)

    def test_bisected(self):
        assert decode_property(0x4000) == BlockData(PropertyKind.BISECTED, Half.TOP)
        assert decode_property(0x4001) == BlockData(PropertyKind.BISECTED, Half.BOTTOM)
        assert decode_property(0x4002).value is Half.TOP

    @pytest.mark.parametrize("tag,kind", [
        (6, PropertyKind.WATERLOGGED),
        (9, PropertyKind.OPEN),
        (12, PropertyKind.ATTACHED),
    ])
    def test_flags(self, tag, kind):
        assert decode_property(prop(tag, 0)) == BlockData(kind, False)
        assert decode_property(prop(tag, 1)) == BlockData(kind, True)
        assert decode_property(prop(tag, 0b10)) == BlockData(kind, False)

    def test_hinge(self):
        assert decode_property(0xD000) == BlockData(PropertyKind.HINGE, Side.LEFT)
        assert decode_property(0xD001) == BlockData(PropertyKind.HINGE, Side.RIGHT)

    def test_unassigned_tag(self):
        assert decode_property(0xF000) is None
        assert decode_property(0xFFFF) is None

    def test_wider_values_are_masked(self):
        assert decode_property(0x1_5009) == BlockData(PropertyKind.DIRECTION, Direction.SOUTH)


class TestDirection:
    """Test the 5-bit direction table shared by DIRECTION and ROTATION."""

    EXPECTED = [
        Direction.DOWN, Direction.EAST, Direction.EAST_NORTH_EAST, Direction.EAST_SOUTH_EAST,
        Direction.NORTH, Direction.NORTH_EAST, Direction.NORTH_NORTH_EAST, Direction.NORTH_NORTH_WEST,
        Direction.NORTH_WEST, Direction.SOUTH, Direction.SOUTH_EAST, Direction.SOUTH_SOUTH_EAST,
        Direction.SOUTH_SOUTH_WEST, Direction.SOUTH_WEST, Direction.UP, Direction.WEST,
        Direction.WEST_NORTH_WEST, Direction.WEST_SOUTH_WEST,
    ]

    def test_code_table(self):
        for code, expected in enumerate(self.EXPECTED):
            assert decode_property(prop(5, code)) == BlockData(PropertyKind.DIRECTION, expected)
            assert decode_property(prop(7, code)) == BlockData(PropertyKind.ROTATION, expected)

    def test_unknown_codes_fall_back_to_north(self):
        for code in range(18, 32):
            assert decode_property(prop(5, code)).value is Direction.NORTH
            assert decode_property(prop(7, code)).value is Direction.NORTH

    def test_only_low_five_bits(self):
        assert decode_property(prop(5, 0x20)).value is Direction.DOWN
        assert decode_property(prop(5, 0x2E)).value is Direction.UP


class TestMultipleFacing:
    """Test the 6-flag face set."""

    def test_no_faces(self):
        assert decode_property(0x8000) == BlockData(PropertyKind.MULTIPLE_FACING, ())

    def test_all_faces_in_order(self):
        assert decode_property(0x803F).value == (
            Direction.NORTH, Direction.SOUTH, Direction.EAST,
            Direction.WEST, Direction.UP, Direction.DOWN,
        )

    def test_single_faces(self):
        assert decode_property(prop(8, 0b000001)).value == (Direction.NORTH,)
        assert decode_property(prop(8, 0b001000)).value == (Direction.WEST,)
        assert decode_property(prop(8, 0b100000)).value == (Direction.DOWN,)

    def test_mixed_faces(self):
        assert decode_property(prop(8, 0b010101)).value == (
            Direction.NORTH, Direction.EAST, Direction.UP,
        )

    def test_bits_above_six_ignored(self):
        assert decode_property(prop(8, 0b11000000)).value == ()


class TestShapes:
    """Test rail and stair shape tables."""

    def test_rail_shapes(self):
        expected = [
            RailShape.ASCENDING_EAST, RailShape.ASCENDING_NORTH, RailShape.ASCENDING_SOUTH,
            RailShape.ASCENDING_WEST, RailShape.EAST_WEST, RailShape.NORTH_EAST,
            RailShape.NORTH_SOUTH, RailShape.NORTH_WEST, RailShape.SOUTH_EAST,
            RailShape.SOUTH_WEST,
        ]
        for code, shape in enumerate(expected):
            assert decode_property(prop(10, code)) == BlockData(PropertyKind.RAIL_SHAPE, shape)

    def test_rail_fallback(self):
        for code in range(10, 16):
            assert decode_property(prop(10, code)).value is RailShape.EAST_WEST

    def test_stair_shapes(self):
        expected = [
            StairShape.INNER_LEFT, StairShape.INNER_RIGHT, StairShape.OUTER_LEFT,
            StairShape.OUTER_RIGHT, StairShape.STRAIGHT,
        ]
        for code, shape in enumerate(expected):
            assert decode_property(prop(11, code)) == BlockData(PropertyKind.STAIR_SHAPE, shape)

    def test_stair_fallback(self):
        for code in range(5, 8):
            assert decode_property(prop(11, code)).value is StairShape.STRAIGHT
        assert decode_property(prop(11, 0b1010)).value is StairShape.OUTER_LEFT


class TestTotality:
    """Every 16-bit value decodes without raising."""

    def test_all_values(self):
        for bits in range(0x10000):
            result = decode_property(bits)
            if bits >> 12 == 15:
                assert result is None
            else:
                assert result is not None
                assert result.kind.value == bits >> 12


class TestRecords:
    """Test property record headers and bodies."""

    def test_header_fields(self):
        assert decode_record_header(0xABC3) == (10, 11, 12, 3)
        assert decode_record_header(0x0000) == (0, 0, 0, 0)
        assert decode_record_header(0xFFFF) == (15, 15, 15, 15)

    def test_read_record(self):
        c = ByteCursor(u16(0x1232, 0x5009, 0x6001))

        coord, values = read_property_record(c)

        assert coord == (1, 2, 3)
        assert values == (
            BlockData(PropertyKind.DIRECTION, Direction.SOUTH),
            BlockData(PropertyKind.WATERLOGGED, True),
        )
        assert c.at_end()

    def test_count_governs_reads(self):
        # Count of 7: exactly seven values are consumed, unassigned tags dropped
        values = [0xF000, 0x1003, 0xF123, 0x9001, 0xFFFF, 0xF000, 0xE002]
        c = ByteCursor(u16(0x0007, *values, 0xBEEF))

        coord, decoded = read_property_record(c)

        assert coord == (0, 0, 0)
        assert decoded == (
            BlockData(PropertyKind.AGE, 3),
            BlockData(PropertyKind.OPEN, True),
            BlockData(PropertyKind.FARMLAND, 2),
        )
        assert c.position == 16
        assert c.read_u16() == 0xBEEF

    def test_zero_count(self):
        c = ByteCursor(u16(0x4560, 0x1001))

        coord, values = read_property_record(c)

        assert coord == (4, 5, 6)
        assert values == ()
        assert c.position == 2

    def test_all_unassigned(self):
        coord, values = read_property_record(ByteCursor(u16(0x0002, 0xF000, 0xF001)))

        assert values == ()

    def test_truncated_record(self):
        with pytest.raises(UnexpectedEnd):
            read_property_record(ByteCursor(u16(0x0003, 0x1001)))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
