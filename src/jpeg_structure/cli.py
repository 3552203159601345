import argparse
import sys
from pathlib import Path

from .crosscheck import crosscheck_frame_header
from .errors import JpegStructureError
from .logger import set_level
from .marker import marker_id_by_name
from .reader import split_file


class FrameHeaderCollector:
    """Keeps every frame header seen while splitting."""

    def __init__(self):
        self.frame_headers = []

    def handle_frame_header(self, frame_header):
        self.frame_headers.append(frame_header)


def cli_segments(args):
    segments = split_file(args.path, chunk_size=args.chunk_size)
    for line in segments.describe():
        print(line)
    return 0


def cli_validate(args):
    segments = split_file(args.path, chunk_size=args.chunk_size)
    data = Path(args.path).read_bytes()
    try:
        segments.validate(data)
    except JpegStructureError as e:
        print(f"Invalid : {e}")
        return 1

    print(f"Valid : ({len(segments)}) segments")
    return 0


def cli_frame(args):
    collector = FrameHeaderCollector()
    split_file(args.path, collector, chunk_size=args.chunk_size)
    if not collector.frame_headers:
        print("No frame header.")
        return 1

    for frame_header in collector.frame_headers:
        print(frame_header)
    return 0


def cli_crosscheck(args):
    collector = FrameHeaderCollector()
    split_file(args.path, collector, chunk_size=args.chunk_size)
    if not collector.frame_headers:
        print("No frame header.")
        return 1

    result = crosscheck_frame_header(Path(args.path).read_bytes(), collector.frame_headers[0])
    print(
        f"Declared : {result.width}x{result.height} ({result.component_count} components)\n"
        f"OpenCV   : {result.reference_width}x{result.reference_height} "
        f"({result.reference_component_count} components)")
    return 0 if result.matches else 1


def cli_extract(args):
    try:
        marker_id = marker_id_by_name(args.marker)
    except KeyError as e:
        print(f"Error : {e.args[0]}", file=sys.stderr)
        return 2

    segments = split_file(args.path, chunk_size=args.chunk_size)
    segment = segments.find(marker_id)
    if segment is None:
        print(f"No {args.marker} segment.")
        return 1

    Path(args.output).write_bytes(segment.payload)
    print(f"Wrote ({len(segment.payload)}) bytes from offset ({segment.offset}) to {args.output}")
    return 0


def get_parser():
    parser = argparse.ArgumentParser(description="JPEG structure parser")
    parser.add_argument("-log", default=None, help="logging level")
    parser.add_argument("-chunk-size", dest="chunk_size", type=int, default=None,
                        help="bytes read per refill")

    subparsers = parser.add_subparsers(dest="command", required=True)

    sub = subparsers.add_parser("segments", help="List the segments of the file")
    sub.add_argument("path", help="Path to the JPEG file")
    sub.set_defaults(func=cli_segments)

    sub = subparsers.add_parser("validate", help="Check segment offsets against the file")
    sub.add_argument("path", help="Path to the JPEG file")
    sub.set_defaults(func=cli_validate)

    sub = subparsers.add_parser("frame", help="Show the frame header")
    sub.add_argument("path", help="Path to the JPEG file")
    sub.set_defaults(func=cli_frame)

    sub = subparsers.add_parser("crosscheck", help="Compare the frame header with OpenCV's decode")
    sub.add_argument("path", help="Path to the JPEG file")
    sub.set_defaults(func=cli_crosscheck)

    sub = subparsers.add_parser("extract", help="Write the payload of a segment to a file")
    sub.add_argument("path", help="Path to the JPEG file")
    sub.add_argument("marker", help="Marker name (APP1) or id (0xe1)")
    sub.add_argument("output", help="Destination file")
    sub.set_defaults(func=cli_extract)

    return parser


def main(argv=None):
    args = get_parser().parse_args(argv)
    if args.log:
        set_level(args.log.upper())

    try:
        return args.func(args)
    except (JpegStructureError, OSError) as e:
        print(f"Error : {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
