import argparse
import asyncio
import json
import sys
from pathlib import Path

from core.errors import ProcessingError
from core.reduction import compute_reduction, format_size
from core.transcoder import TRANSCODERS, get_transcoder
from utils.logging import setup_logging


def optimize_file(input_path: str, output_path: str, method: str = "ffmpeg") -> dict:
    transcoder = get_transcoder(method)
    original_size = Path(input_path).stat().st_size
    print(f"Optimizing {input_path} with {transcoder.method}...")

    stats = asyncio.run(transcoder.transcode(input_path, output_path))
    optimized_size = Path(output_path).stat().st_size

    result = {
        "originalSize": original_size,
        "optimizedSize": optimized_size,
        "originalUrl": str(Path(input_path).resolve()),
        "optimizedUrl": str(Path(output_path).resolve()),
        "reduction": compute_reduction(original_size, optimized_size),
    }

    print(f"\nCompleted in {stats.elapsed:.2f}s")
    print(f"Original size:  {format_size(original_size)}")
    print(f"Optimized size: {format_size(optimized_size)}")
    print(f"Size reduction: {result['reduction']}% "
          f"(saved {format_size(original_size - optimized_size)})")
    return result


def default_output_path(input_path: str) -> str:
    path = Path(input_path)
    return str(path.with_name(f"optimized-{path.name}"))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Video Optimizer")
    parser.add_argument("input", help="Input video path")
    parser.add_argument("-o", "--output", help="Output video path (default: optimized-<input>)")
    parser.add_argument("-m", "--method", default="ffmpeg", choices=sorted(TRANSCODERS),
                        help="Encoder to use")
    parser.add_argument("--json", action="store_true", help="Print the result record as JSON")
    parser.add_argument("--log-level", default="WARNING")

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if not Path(args.input).exists():
        print(f"Error: Video file not found: {args.input}")
        return 1

    output = args.output or default_output_path(args.input)
    try:
        result = optimize_file(args.input, output, args.method)
    except ProcessingError as e:
        print(f"Error: {e}")
        if e.stderr:
            print(e.stderr)
        return 1

    if args.json:
        print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
