"""
Packaging of extracted cards.

Bundles Output Records into a single ZIP archive or writes them to a
directory. Two cards resolving to the same filename (for example nested
detections of one barcode) are kept apart with a numeric suffix.
"""

import io
import logging
import zipfile
from pathlib import Path
from typing import Dict, Iterable, List

from src.pipeline.types import OutputRecord

logger = logging.getLogger(__name__)


def unique_filenames(records: Iterable[OutputRecord]) -> Dict[str, OutputRecord]:
    """
    Map a collision-free filename to each record, preserving order.

    The first record keeps its name; later duplicates become
    ``<stem>_2<ext>``, ``<stem>_3<ext>``, ...
    """
    named: Dict[str, OutputRecord] = {}
    for record in records:
        name = record.filename
        if name in named:
            stem, ext = _split_extension(name)
            n = 2
            while f"{stem}_{n}{ext}" in named:
                n += 1
            name = f"{stem}_{n}{ext}"
            logger.debug(f"Renamed duplicate '{record.filename}' to '{name}'")
        named[name] = record
    return named


def package_records(records: Iterable[OutputRecord]) -> bytes:
    """
    Build a ZIP archive containing one PNG per record.

    Returns:
        The archive as bytes.
    """
    named = unique_filenames(records)

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, record in named.items():
            zf.writestr(name, record.image_bytes)

    logger.info(f"Packaged {len(named)} card(s) into archive ({buffer.tell()} bytes)")
    return buffer.getvalue()


def save_records(records: Iterable[OutputRecord], output_dir: Path) -> List[Path]:
    """
    Write every record to `output_dir` as its own file.

    Returns:
        Paths written, in record order.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for name, record in unique_filenames(records).items():
        path = output_dir / name
        path.write_bytes(record.image_bytes)
        paths.append(path)

    logger.info(f"Saved {len(paths)} card(s) to {output_dir}")
    return paths


def _split_extension(filename: str):
    stem, dot, ext = filename.rpartition(".")
    if not dot or not stem:
        return filename, ""
    return stem, f".{ext}"
