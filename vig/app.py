import argparse
import logging
import os
import sys

from . import __version__
from .assembler import ImageAssembler
from .config import GridSpec, SheetConfig, parse_resolution
from .errors import VigError


class _Parser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit with status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="vig",
        usage="vig [options] <video_file>",
        description="Create a gallery image of evenly spaced thumbnails from a video.")
    parser.add_argument("--res", default="3x3", metavar="WxH",
                        help="Grid resolution (default: 3x3)")
    parser.add_argument("-v", "--version", action="version",
                        version=f"vig version {__version__}")
    parser.add_argument("--verbose", action="store_true",
                        help="Log pipeline progress")
    parser.add_argument("inputs", nargs="*", metavar="video_file",
                        help="Video to summarize (MP4, MOV or WMV)")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_intermixed_args(argv)
    except SystemExit as e:
        # --help, --version and usage errors
        return e.code if isinstance(e.code, int) else 0

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if not args.inputs:
        print("Error: no input file provided.", file=sys.stderr)
        return 1
    input_path = args.inputs[-1]

    try:
        cols, rows = parse_resolution(args.res)
        config = SheetConfig(grid=GridSpec(cols=cols, rows=rows))
        output = ImageAssembler(input_path, config).run()
    except VigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Image generated: '{os.path.basename(output)}'")
    return 0


if __name__ == "__main__":
    sys.exit(main())
