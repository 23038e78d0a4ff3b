"""
pyessence CLI.

Commands:
    generate   Embed a directory into a generated Python package
    info       Show what would be embedded, without writing anything

Examples:
    essence generate --package-name assets --src-dir ./static
    essence generate --exclude '*.map' --exclude '.DS_Store'
    essence info --src-dir ./static

Defaults for --package-name and --src-dir can also be set with the
ESSENCE_PACKAGE_NAME and ESSENCE_SRC_DIR environment variables.
"""

from __future__ import annotations

import argparse
import sys

from pyessence.runtime import DEFAULT_PACKAGE_NAME, DEFAULT_SRC_DIR


def cmd_generate(args: argparse.Namespace) -> int:
    """Handle generate command."""
    from pyessence.gen import generate
    from pyessence.runtime import get_runtime_config, set_global_config
    from pyessence.vfs import EssenceError

    config = get_runtime_config(
        package_name=args.package_name,
        src_dir=args.src_dir,
        out_dir=args.out_dir,
        compact_json=not args.no_compact,
        sort_entries=not args.no_sort,
        exclude=args.exclude,
        verbose=not args.quiet,
    )
    set_global_config(config)

    try:
        generate()
        return 0
    except EssenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_info(args: argparse.Namespace) -> int:
    """Handle info command."""
    from pyessence.ingest import build_tree
    from pyessence.runtime import get_runtime_config
    from pyessence.vfs import EssenceError

    config = get_runtime_config(
        src_dir=args.src_dir,
        compact_json=not args.no_compact,
        exclude=args.exclude,
    )

    try:
        fs = build_tree(
            config.src_dir,
            compact_json=config.compact_json,
            sort_entries=config.sort_entries,
            exclude=config.exclude,
        )
    except EssenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    stats = fs.stats()
    print(f"Source: {config.src_dir}")
    print()
    print("Stats:")
    print(f"  Files: {stats['files']}")
    print(f"  Directories: {stats['directories']}")
    print(f"  Embedded size: {stats['bytes']:,} bytes")

    if stats["files"] or stats["directories"]:
        print()
        print("Tree:")
        for path, node in fs.walk():
            if path == "/":
                continue
            if node.is_dir:
                print(f"  {path}/")
            else:
                print(f"  {path} ({node.size:,} bytes)")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        prog="essence",
        description="Embed static assets into a Python package.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # generate
    generate_parser = subparsers.add_parser(
        "generate",
        help="Embed a directory into a generated package",
    )
    generate_parser.add_argument(
        "--package-name",
        default=None,
        help=f"Package name of the generated file system (default: {DEFAULT_PACKAGE_NAME})",
    )
    generate_parser.add_argument(
        "--src-dir",
        default=None,
        help=f"Source directory (default: {DEFAULT_SRC_DIR})",
    )
    generate_parser.add_argument(
        "-o",
        "--out-dir",
        default=None,
        help="Directory to write the package into (default: current directory)",
    )
    generate_parser.add_argument(
        "--no-compact",
        action="store_true",
        help="Embed JSON files as-is instead of stripping whitespace",
    )
    generate_parser.add_argument(
        "--no-sort",
        action="store_true",
        help="Keep directory listing order instead of sorting by name",
    )
    generate_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Skip entries whose name matches PATTERN (repeatable)",
    )
    generate_parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Don't print embedded files and written paths",
    )

    # info
    info_parser = subparsers.add_parser(
        "info",
        help="Show what would be embedded",
    )
    info_parser.add_argument(
        "--src-dir",
        default=None,
        help=f"Source directory (default: {DEFAULT_SRC_DIR})",
    )
    info_parser.add_argument(
        "--no-compact",
        action="store_true",
        help="Report JSON sizes without compaction",
    )
    info_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Skip entries whose name matches PATTERN (repeatable)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "generate":
        return cmd_generate(args)
    elif args.command == "info":
        return cmd_info(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
