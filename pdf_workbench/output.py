"""
output.py - Writing results to disk.

Bytes are written unchanged; naming follows the conventions of the
operation that produced them.
"""

import logging
import time
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def deliver(data: bytes, filename: str, output_dir: Path = Path(".")) -> Path:
    """
    Save bytes as a named file.

    Returns:
        Path of the written file
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / filename
    output_path.write_bytes(data)
    logger.info(f"Saved {format_size(len(data))} to {output_path}")
    return output_path


def output_filename(operation: str, source_name: Optional[str] = None) -> str:
    """
    Default file name for an operation's result.

    compress keeps the source name with a "compressed_" prefix; the other
    operations are stamped with the current time in milliseconds.
    """
    if operation == "compress" and source_name:
        return f"compressed_{Path(source_name).name}"
    if operation == "resize" and source_name:
        return f"resized_{Path(source_name).name}"

    prefixes = {
        "images": "images_merged",
        "merge": "merged",
        "split": "split",
        "compress": "compressed",
    }
    if operation not in prefixes:
        raise ValueError(f"Unknown operation: {operation}")
    return f"{prefixes[operation]}_{int(time.time() * 1000)}.pdf"


def format_size(num_bytes: int) -> str:
    """Human-readable size, e.g. 1536 -> '1.5 KB'."""
    if num_bytes == 0:
        return "0 Bytes"
    i = 0
    while num_bytes >= 1024 ** (i + 1) and i < len(_SIZE_UNITS) - 1:
        i += 1
    value = round(num_bytes / 1024 ** i, 2)
    return f"{value:g} {_SIZE_UNITS[i]}"
