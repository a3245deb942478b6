"""
Format versions and decode options.

Writers of the .dan format have disagreed on the width of the extra-table
count: the first loader reads a uint16, later tooling a uint32. The width
is therefore looked up from the version byte in FORMAT_VERSIONS. Files
with a version missing from the table are rejected unless the caller
states the width explicitly through DecodeOptions.extra_count_width.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from danworld.biomes import BiomeLookup, biome_from_code
from danworld.cursor import ByteCursor
from danworld.errors import UnsupportedVersion

MAGIC = "DanWorld"
COMPRESSIONS = ("gzip", "zlib", None)


@dataclass(frozen=True)
class FormatVersion:
    """Layout details that change between file versions."""
    version: int
    extra_count_width: int = 2


FORMAT_VERSIONS: Dict[int, FormatVersion] = {
    1: FormatVersion(version=1, extra_count_width=2),
    2: FormatVersion(version=2, extra_count_width=4),
}


@dataclass
class DecodeOptions:
    """
    Settings for decoding a world.

    Attributes:
        biome_lookup: Maps each biome byte to a biome value
        compression: "gzip", "zlib" or None, used by load_world only
        extra_count_width: Force the extra count width (2 or 4 bytes)
                           instead of looking it up by version
        strict: Reject bytes left over after the extra table
    """
    biome_lookup: BiomeLookup = biome_from_code
    compression: Optional[str] = "gzip"
    extra_count_width: Optional[int] = None
    strict: bool = False

    def validate(self) -> None:
        if self.compression not in COMPRESSIONS:
            raise ValueError(f"Unknown compression type: {self.compression!r}")
        if self.extra_count_width not in (None, 2, 4):
            raise ValueError(f"Extra count width must be 2 or 4, got {self.extra_count_width}")


def format_for_version(version: int, options: DecodeOptions) -> FormatVersion:
    """
    Resolve the layout for a file version.

    Raises:
        UnsupportedVersion: If the version is unknown and no override is set
    """
    if options.extra_count_width is not None:
        return FormatVersion(version=version, extra_count_width=options.extra_count_width)
    try:
        return FORMAT_VERSIONS[version]
    except KeyError:
        raise UnsupportedVersion(version) from None


def read_extra_count(cursor: ByteCursor, fmt: FormatVersion) -> int:
    if fmt.extra_count_width == 4:
        return cursor.read_u32()
    return cursor.read_u16()
