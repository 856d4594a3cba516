"""
Command-line entry point for card extraction.

Usage:
    python -m src.pipeline.full_pipeline --input scan.jpg --output cards
    python -m src.pipeline.full_pipeline --input scan.jpg --output cards --zip
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from src.identification.config_loader import get_default_config
from src.identification.config_loader import load_config as load_identification_config
from src.pipeline.archive import package_records, save_records
from src.pipeline.processor import CardExtractionPipeline
from src.pipeline.types import CardExtractionError
from src.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract every card in a scanned photograph as its own image"
    )
    parser.add_argument("--input", type=str, required=True, help="Input image (PNG/JPEG)")
    parser.add_argument("--output", type=str, default="cards", help="Output directory")
    parser.add_argument(
        "--zip", action="store_true", help="Write a single cards.zip instead of PNG files"
    )
    parser.add_argument(
        "--config", type=str, default=None, help="Extraction config YAML"
    )
    parser.add_argument(
        "--id-config", type=str, default=None, help="Identification config YAML"
    )
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")
    parser.add_argument("--log-file", type=str, default=None, help="Optional log file")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level, Path(args.log_file) if args.log_file else None)

    identification_config = (
        load_identification_config(Path(args.id_config))
        if args.id_config
        else get_default_config()
    )
    pipeline = CardExtractionPipeline(
        identification_config=identification_config,
        extraction_config_path=Path(args.config) if args.config else None,
    )

    def on_progress(fraction: float) -> None:
        print(f"Detecting and cropping cards... {round(fraction * 100)}%")

    try:
        records = pipeline.run(Path(args.input), progress_callback=on_progress)
    except CardExtractionError as e:
        print(f"Failed to process image: {e}", file=sys.stderr)
        return 1

    output_dir = Path(args.output)
    if args.zip:
        output_dir.mkdir(parents=True, exist_ok=True)
        archive_path = output_dir / "cards.zip"
        archive_path.write_bytes(package_records(records))
        print(f"Wrote {archive_path}")
    else:
        save_records(records, output_dir)

    print(f"Detected cards: {len(records)}")
    for record in records:
        print(f"  {record.filename}  {record.width}x{record.height}  ({record.source.value})")

    return 0


if __name__ == "__main__":
    sys.exit(main())
