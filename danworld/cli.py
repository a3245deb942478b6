"""
DanWorld CLI - inspect .dan world files.

Usage:
    danworld info world.dan
    danworld extra world.dan spawn --as pos
    danworld blocks world.dan --chunk 0 0 --section 2
"""

import argparse
import logging
import sys


def _options(args):
    from danworld.formats import DecodeOptions

    return DecodeOptions(
        compression=None if args.compression == "none" else args.compression,
        extra_count_width=args.extra_count_width,
        strict=args.strict,
    )


def cmd_info(args):
    """Show a summary of a .dan file."""
    from danworld.world import load_world, get_world_info

    try:
        info = get_world_info(load_world(args.world_file, _options(args)))

        print(f"Version: {info['version']}")
        print(f"Dimension: {info['dimension']}")
        print(f"Size: {info['width']}x{info['depth']} chunks")
        print(f"\nChunks: {info['chunks']}")
        print(f"Sections: {info['sections']}")
        print(f"Blocks: {info['blocks']} ({info['property_blocks']} with properties)")

        names = info["block_names"]
        print(f"\nBlock types: {len(names)}")
        for name in names:
            print(f"  - {name}")

        print(f"\nExtras: {len(info['extra'])}")
        for key, size in info["extra"].items():
            print(f"  {key}: {size} bytes")

        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_extra(args):
    """Print one extra value."""
    from danworld.world import load_world

    try:
        world = load_world(args.world_file, _options(args))
        value = world.get_extra(args.key)
        if value is None:
            print(f"Error: no extra named {args.key!r}", file=sys.stderr)
            return 1

        if args.view == "pos":
            pos = value.as_position()
            print(f"x={pos.x} y={pos.y} z={pos.z} yaw={pos.yaw} pitch={pos.pitch}")
        elif args.view == "str":
            print(value.as_string())
        else:
            print(value.data.hex())
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_blocks(args):
    """Show palette usage of one section."""
    from danworld.world import load_world

    try:
        world = load_world(args.world_file, _options(args))
        chunk_x, chunk_z = args.chunk
        chunk = world.chunk_at(chunk_x, chunk_z)
        if chunk is None:
            print(f"Error: no chunk at ({chunk_x}, {chunk_z})", file=sys.stderr)
            return 1
        if not 0 <= args.section < len(chunk.sections):
            print(
                f"Error: chunk has {len(chunk.sections)} sections, no section {args.section}",
                file=sys.stderr,
            )
            return 1

        section = chunk.sections[args.section]
        print(f"Chunk ({chunk.x}, {chunk.z}) section {args.section}")
        for name, count in section.palette_counts().items():
            print(f"  {name}: {count}")
        print(f"Blocks with properties: {len(section.properties)}")
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="DanWorld CLI - Inspect .dan world files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  danworld info world.dan
  danworld extra world.dan spawn --as pos
  danworld blocks world.dan --chunk 0 0 --section 0
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log decoding progress")

    # options shared by every command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("world_file", help="Path to .dan file")
    common.add_argument(
        "--compression",
        choices=["gzip", "zlib", "none"],
        default="gzip",
        help="File compression (default: gzip)",
    )
    common.add_argument(
        "--extra-count-width",
        type=int,
        choices=[2, 4],
        help="Override the extra table count width in bytes",
    )
    common.add_argument("--strict", action="store_true", help="Reject trailing bytes")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # info
    info_parser = subparsers.add_parser(
        "info",
        parents=[common],
        help="Show information about a .dan file",
    )
    info_parser.set_defaults(func=cmd_info)

    # extra
    extra_parser = subparsers.add_parser(
        "extra",
        parents=[common],
        help="Print a named extra value",
    )
    extra_parser.add_argument("key", help="Extra key")
    extra_parser.add_argument(
        "--as",
        dest="view",
        choices=["raw", "pos", "str"],
        default="raw",
        help="How to read the value (default: raw hex)",
    )
    extra_parser.set_defaults(func=cmd_extra)

    # blocks
    blocks_parser = subparsers.add_parser(
        "blocks",
        parents=[common],
        help="Show block counts of one chunk section",
    )
    blocks_parser.add_argument(
        "--chunk", type=int, nargs=2, metavar=("X", "Z"), required=True, help="Chunk coordinates"
    )
    blocks_parser.add_argument("--section", type=int, default=0, help="Section index (default: 0)")
    blocks_parser.set_defaults(func=cmd_blocks)

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
