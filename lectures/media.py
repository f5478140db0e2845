"""Media file inspection through ffprobe."""

from __future__ import annotations

import json
import logging
import math
import shutil
import subprocess
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class MediaProbeError(Exception):
    """ffprobe is missing or could not report a duration."""


def media_duration_ms(file_path: Union[str, Path]) -> int:
    """Return the duration of a media file in milliseconds."""
    command = [
        "ffprobe",
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "json",
        str(file_path),
    ]
    try:
        completed = subprocess.run(command, capture_output=True, text=True)
    except OSError as error:
        raise MediaProbeError(f"ffprobe failed: {error}") from error
    if completed.returncode != 0:
        raise MediaProbeError(f"ffprobe failed: exit status {completed.returncode}")

    try:
        data = json.loads(completed.stdout)
    except json.JSONDecodeError as error:
        raise MediaProbeError(f"failed to parse ffprobe output: {error}") from error

    format_info = data.get("format") if isinstance(data, dict) else None
    duration_text = format_info.get("duration", "") if isinstance(format_info, dict) else ""
    if not isinstance(duration_text, str):
        raise MediaProbeError("failed to parse ffprobe output: duration is not a string")

    try:
        duration_seconds = float(duration_text)
    except ValueError as error:
        raise MediaProbeError(f"failed to parse duration: {duration_text!r}") from error
    if not math.isfinite(duration_seconds):
        raise MediaProbeError(f"failed to parse duration: {duration_text!r}")

    duration_ms = int(duration_seconds * 1000)
    logger.debug(
        "Extracted media duration file_path=%s seconds=%s milliseconds=%d",
        file_path, duration_seconds, duration_ms,
    )
    return duration_ms


def check_dependencies() -> None:
    """Raise MediaProbeError unless ffprobe is on the PATH."""
    if shutil.which("ffprobe") is None:
        raise MediaProbeError("ffprobe not found in PATH (install ffmpeg)")