import argparse
import sys

from .config import load_settings
from .convert import convert
from .errors import ConversionError


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="logconv",
        description="Convert E004 sensor-log bundles into <name>_CONVERTED.txt",
    )
    p.add_argument("input", help="Sensor-log file to convert")
    p.add_argument("output_dir", help="Directory the converted file is written to")
    p.add_argument("--config", help="YAML settings file (default: $LOGCONV_CONFIG)")
    p.add_argument("--lenient", action="store_true",
                   help="Skip malformed bundles instead of failing the run")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every bundle")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(
        args.config,
        strict=False if args.lenient else None,
        log_level="DEBUG" if args.verbose else None,
    )
    try:
        convert(args.input, args.output_dir, settings)
    except ConversionError as e:
        print(f"logconv: {e.kind}: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
