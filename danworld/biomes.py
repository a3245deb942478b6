"""
Biome codes used in section biome arrays.

The exporter writes one byte per block, numbering biomes alphabetically.
Anything it cannot name (custom biomes) is written as PLAINS, and the
default lookup maps unknown codes to PLAINS as well.

A lookup is any callable taking the code and returning a biome value;
pass a different one through DecodeOptions to change the mapping.
"""

from enum import Enum
from typing import Any, Callable


class Biome(Enum):
    BADLANDS = 0
    BAMBOO_JUNGLE = 1
    BASALT_DELTAS = 2
    BEACH = 3
    BIRCH_FOREST = 4
    CHERRY_GROVE = 5
    COLD_OCEAN = 6
    CRIMSON_FOREST = 7
    DARK_FOREST = 8
    DEEP_COLD_OCEAN = 9
    DEEP_DARK = 10
    DEEP_FROZEN_OCEAN = 11
    DEEP_LUKEWARM_OCEAN = 12
    DEEP_OCEAN = 13
    DESERT = 14
    DRIPSTONE_CAVES = 15
    END_BARRENS = 16
    END_HIGHLANDS = 17
    END_MIDLANDS = 18
    ERODED_BADLANDS = 19
    FLOWER_FOREST = 20
    FOREST = 21
    FROZEN_OCEAN = 22
    FROZEN_PEAKS = 23
    FROZEN_RIVER = 24
    GROVE = 25
    ICE_SPIKES = 26
    JAGGED_PEAKS = 27
    JUNGLE = 28
    LUKEWARM_OCEAN = 29
    LUSH_CAVES = 30
    MANGROVE_SWAMP = 31
    MEADOW = 32
    MUSHROOM_FIELDS = 33
    NETHER_WASTES = 34
    OCEAN = 35
    OLD_GROWTH_BIRCH_FOREST = 36
    OLD_GROWTH_PINE_TAIGA = 37
    OLD_GROWTH_SPRUCE_TAIGA = 38
    PLAINS = 39
    RIVER = 40
    SAVANNA = 41
    SAVANNA_PLATEAU = 42
    SMALL_END_ISLANDS = 43
    SNOWY_BEACH = 44
    SNOWY_PLAINS = 45
    SNOWY_SLOPES = 46
    SNOWY_TAIGA = 47
    SOUL_SAND_VALLEY = 48
    SPARSE_JUNGLE = 49
    STONY_PEAKS = 50
    STONY_SHORE = 51
    SUNFLOWER_PLAINS = 52
    SWAMP = 53
    TAIGA = 54
    THE_END = 55
    THE_VOID = 56
    WARM_OCEAN = 57
    WARPED_FOREST = 58
    WINDSWEPT_FOREST = 59
    WINDSWEPT_GRAVELLY_HILLS = 60
    WINDSWEPT_HILLS = 61
    WINDSWEPT_SAVANNA = 62
    WOODED_BADLANDS = 63


BiomeLookup = Callable[[int], Any]

_BY_CODE = {biome.value: biome for biome in Biome}


def biome_from_code(code: int) -> Biome:
    """Map a biome byte to a Biome, falling back to PLAINS."""
    return _BY_CODE.get(code, Biome.PLAINS)


def constant_biome(biome: Any = Biome.PLAINS) -> BiomeLookup:
    """Build a lookup that ignores the code and always returns `biome`."""
    def lookup(code: int) -> Any:
        return biome
    return lookup
