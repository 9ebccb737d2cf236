"""
cli.py - Command-line front end.

Usage:
    pdf-workbench images scan1.jpg scan2.png -o scans.pdf
    pdf-workbench merge a.pdf b.pdf c.pdf
    pdf-workbench split report.pdf "1-3, 7"
    pdf-workbench compress scan.pdf --level high
    pdf-workbench resize photo.jpg --width 800
"""

import argparse
import logging
import mimetypes
import sys
from pathlib import Path

from .compression import QUALITY_PRESETS, resolve_quality
from .exceptions import WorkbenchError
from .images import resize_image
from .output import deliver, format_size, output_filename
from .pipeline import compress_pdf_with_stats, images_to_pdf, merge_pdfs, split_pdf

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="pdf-workbench",
        description="Convert images to PDF, merge, split and compress PDFs.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Compression levels:
  low    - quality 0.8, best looking
  medium - quality 0.6 (default)
  high   - quality 0.4, smallest files

Compression rasterizes every page, so text is no longer selectable.
"""
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    output = argparse.ArgumentParser(add_help=False)
    output.add_argument(
        "-o", "--output",
        type=Path,
        help="Output file (default: named after the operation)"
    )
    output.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory for the output file (default: current directory)"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    images = commands.add_parser("images", parents=[output], help="Convert JPEG/PNG images to one PDF")
    images.add_argument("input", nargs="+", type=Path, help="Image file(s), one page each")

    merge = commands.add_parser("merge", parents=[output], help="Merge PDFs in the given order")
    merge.add_argument("input", nargs="+", type=Path, help="Input PDF file(s)")

    split = commands.add_parser("split", parents=[output], help="Extract a page range")
    split.add_argument("input", type=Path, help="Input PDF file")
    split.add_argument("ranges", help='Pages to keep, e.g. "1-3, 5"')

    compress = commands.add_parser("compress", parents=[output], help="Rasterize pages to JPEG")
    compress.add_argument("input", type=Path, help="Input PDF file")
    level = compress.add_mutually_exclusive_group()
    level.add_argument(
        "-l", "--level",
        choices=list(QUALITY_PRESETS),
        default="medium",
        help="Compression level (default: medium)"
    )
    level.add_argument(
        "-q", "--quality",
        type=float,
        help="JPEG quality 0.0-1.0 (overrides --level)"
    )

    resize = commands.add_parser("resize", parents=[output], help="Resize a JPEG/PNG image")
    resize.add_argument("input", type=Path, help="Input image")
    resize.add_argument("--width", type=int, help="Target width in pixels")
    resize.add_argument("--height", type=int, help="Target height in pixels")
    resize.add_argument(
        "--no-keep-aspect",
        dest="keep_aspect",
        action="store_false",
        help="Do not derive the missing side from the aspect ratio"
    )

    return parser.parse_args(argv)


def print_progress(current: int, total: int):
    """Print progress bar."""
    width = 40
    filled = int(width * current / total)
    bar = "=" * filled + "-" * (width - filled)
    pct = current / total * 100
    print(f"\r[{bar}] {current}/{total} ({pct:.0f}%)", end="", file=sys.stderr)
    if current == total:
        print(file=sys.stderr)


def guess_mime_type(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type or "application/octet-stream"


def run(args) -> Path:
    """Execute one subcommand and return the written file."""
    if args.command == "images":
        data = images_to_pdf((p.read_bytes(), guess_mime_type(p)) for p in args.input)
        name = output_filename("images")
    elif args.command == "merge":
        data = merge_pdfs(p.read_bytes() for p in args.input)
        name = output_filename("merge")
    elif args.command == "split":
        data = split_pdf(args.input.read_bytes(), args.ranges)
        name = output_filename("split")
    elif args.command == "compress":
        quality = resolve_quality(args.quality if args.quality is not None else args.level)
        result = compress_pdf_with_stats(
            args.input.read_bytes(),
            quality,
            on_progress=print_progress
        )
        print(f"\n{result.summary()}")
        print(f"{format_size(result.original_size)} -> {format_size(result.compressed_size)}")
        if result.compressed_size >= result.original_size:
            print("Note: File size did not decrease. Try the high compression level.")
        data = result.data
        name = output_filename("compress", args.input.name)
    elif args.command == "resize":
        data = resize_image(
            args.input.read_bytes(),
            guess_mime_type(args.input),
            width=args.width,
            height=args.height,
            keep_aspect=args.keep_aspect
        )
        name = output_filename("resize", args.input.name)
    else:
        raise ValueError(f"Unknown command: {args.command}")

    if args.output:
        return deliver(data, args.output.name, args.output.parent)
    return deliver(data, name, args.output_dir)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        output_path = run(args)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except WorkbenchError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        sys.exit(130)

    print(f"Output: {output_path}")
    sys.exit(0)


if __name__ == "__main__":
    main()
