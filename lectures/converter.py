"""Document export through pandoc: HTML, PDF and DOCX output plus metadata headers."""

from __future__ import annotations

import datetime
import logging
import shutil
import subprocess
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from lectures.i18n import format_localized_date, get_label

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

TEMPLATE_PATH = "xelatex-template.tex"

# Language code -> (main font, CJK options)
_LANGUAGE_FONTS: Dict[str, Tuple[str, str]] = {
    "ja": ("Noto Serif JP", "AutoFakeBold"),
    "ko": ("Noto Serif KR", "AutoFakeBold"),
    "zh": ("Noto Serif SC", "AutoFakeBold"),
    "ar": ("Noto Serif Arabic", ""),
    "he": ("Noto Serif Hebrew", ""),
    "th": ("Noto Serif Thai", ""),
    "hi": ("Noto Serif Devanagari", ""),
    "bn": ("Noto Serif Bengali", ""),
    "ta": ("Noto Serif Tamil", ""),
    "hy": ("Noto Serif Armenian", ""),
    "ka": ("Noto Serif Georgian", ""),
    "ru": ("Noto Serif", ""),
}


class ConversionError(Exception):
    """A document conversion or its prerequisites failed."""


@dataclass
class ReferenceFileMetadata:
    """A reference document listed in the exported metadata."""

    filename: str
    page_range: str = ""
    page_count: int = 0


@dataclass
class AudioFileMetadata:
    """An audio recording listed in the exported metadata; duration in seconds."""

    filename: str
    duration: int = 0


@dataclass
class ConversionOptions:
    """Settings for generating an exported document."""

    language: str = ""
    description: str = ""
    creation_date: Optional[datetime.date] = None
    reference_files: List[ReferenceFileMetadata] = field(default_factory=list)
    audio_files: List[AudioFileMetadata] = field(default_factory=list)


def _run_pandoc(arguments: Sequence[str], stdin_text: str, what: str, capture_stdout: bool) -> str:
    try:
        completed = subprocess.run(
            ["pandoc", *arguments],
            input=stdin_text,
            stdout=subprocess.PIPE if capture_stdout else subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
        )
    except OSError as error:
        raise ConversionError(f"pandoc {what} conversion failed: {error}, stderr: ") from error
    if completed.returncode != 0:
        raise ConversionError(
            f"pandoc {what} conversion failed: exit status {completed.returncode}, "
            f"stderr: {completed.stderr or ''}"
        )
    return completed.stdout or "" if capture_stdout else ""


class PandocConverter:
    """Converts markdown to HTML, PDF and DOCX with pandoc and tectonic."""

    def __init__(self, data_directory: PathLike) -> None:
        self.data_directory = str(data_directory)

    def check_dependencies(self) -> None:
        """Raise ConversionError unless pandoc and tectonic are on the PATH."""
        for program in ("pandoc", "tectonic"):
            if shutil.which(program) is None:
                raise ConversionError(f"{program} not found in PATH")

    def markdown_to_html(self, markdown_text: str) -> str:
        """Convert GitHub-flavoured markdown into an HTML fragment."""
        arguments = [
            "-f", "gfm+smart",
            "-t", "html",
            "--standalone=false",
            "--mathml",
            "--wrap=none",
            "--toc",
            "--section-divs=false",
        ]
        return _run_pandoc(arguments, markdown_text, "html", capture_stdout=True)

    def html_to_pdf(self, html_content: str, output_path: PathLike, options: ConversionOptions) -> None:
        """Render HTML into a PDF file using the XeLaTeX template."""
        metadata_path = Path(tempfile.gettempdir()) / f"metadata-{time.time_ns()}.yaml"
        try:
            metadata_path.write_text(self.render_metadata_yaml(options), encoding="utf-8")
        except OSError as error:
            raise ConversionError(f"failed to write metadata file: {error}") from error

        try:
            logger.debug(
                "Using XeLaTeX template path=%s exists=%s",
                TEMPLATE_PATH, Path(TEMPLATE_PATH).exists(),
            )
            arguments = [
                "-f", "html",
                "-t", "pdf",
                "--resource-path", self.data_directory,
                "--pdf-engine-opt=-Zcontinue-on-errors",
                "--pdf-engine=tectonic",
                "--template", TEMPLATE_PATH,
                "--toc",
                "--shift-heading-level-by=-1",
                "--metadata-file", str(metadata_path),
                "-o", str(output_path),
            ]
            fonts = _LANGUAGE_FONTS.get(options.language)
            if fonts:
                main_font, cjk_options = fonts
                if main_font:
                    arguments += ["-V", f"mainfont={main_font}"]
                if cjk_options:
                    arguments += ["-V", f"CJKoptions={cjk_options}"]
            _run_pandoc(arguments, html_content, "pdf", capture_stdout=False)
        finally:
            metadata_path.unlink(missing_ok=True)

    def html_to_docx(self, html_content: str, output_path: PathLike, options: ConversionOptions) -> None:
        """Render HTML into a DOCX file."""
        arguments = [
            "-f", "html",
            "-t", "docx",
            "--resource-path", self.data_directory,
            "--toc",
            "-o", str(output_path),
        ]
        _run_pandoc(arguments, html_content, "docx", capture_stdout=False)

    def save_markdown(self, markdown_text: str, output_path: PathLike) -> None:
        """Write the markdown text to a file."""
        Path(output_path).write_text(markdown_text, encoding="utf-8")

    def format_duration(self, duration_seconds: int, language: str) -> str:
        """Format seconds as a localised duration; empty for non-positive values."""
        if duration_seconds <= 0:
            return ""
        hour = get_label(language, "hour_label")
        minute = get_label(language, "minute_label")
        second = get_label(language, "second_label")

        hours, remainder = divmod(duration_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        if hours > 0:
            return f"{hours}{hour} {minutes}{minute}"
        if minutes > 0:
            return f"{minutes}{minute} {seconds}{second}"
        return f"{seconds}{second}"

    def _reference_metadata(self, file: ReferenceFileMetadata, language: str, separator: str) -> str:
        pages_label = get_label(language, "pages_label")
        if file.page_range:
            return f"{pages_label} {file.page_range}"
        if file.page_count > 0:
            label = get_label(language, "page_label") if file.page_count == 1 else pages_label
            return f"{label} 1{separator}{file.page_count}"
        return ""

    def generate_metadata_header(self, options: ConversionOptions) -> str:
        """Build a localised markdown header describing the document."""
        language = options.language
        parts: List[str] = []

        if options.creation_date is not None:
            label = get_label(language, "date_label")
            parts.append(f"**{label}**: {format_localized_date(options.creation_date, language)}\n\n")

        if options.description:
            label = get_label(language, "abstract")
            label = label[:1].upper() + label[1:]
            parts.append(f"### {label}\n\n{options.description}\n\n")

        if options.audio_files:
            parts.append(f"### {get_label(language, 'audio_files')}\n\n")
            for audio in options.audio_files:
                duration = self.format_duration(audio.duration, language)
                if duration:
                    parts.append(f"- {audio.filename} ({duration})\n")
                else:
                    parts.append(f"- {audio.filename}\n")
            parts.append("\n")

        if options.reference_files:
            parts.append(f"### {get_label(language, 'reference_files')}\n\n")
            for file in options.reference_files:
                metadata = self._reference_metadata(file, language, "-")
                if metadata:
                    parts.append(f"- {file.filename} ({metadata})\n")
                else:
                    parts.append(f"- {file.filename}\n")
            parts.append("\n")

        return "".join(parts)

    def render_metadata_yaml(self, options: ConversionOptions) -> str:
        """Build the pandoc metadata YAML used by the PDF template."""
        language = options.language
        logger.info(
            "Preparing PDF metadata language=%s description=%r creation_date=%s",
            language, options.description, options.creation_date,
        )
        lines = [
            f'lang: "{language}"',
            f'abstract-title: "{get_label(language, "abstract")}"',
            f'audio-files-title: "{get_label(language, "audio_files")}"',
            f'reference-files-title: "{get_label(language, "reference_files")}"',
        ]
        if options.description:
            escaped = options.description.replace('"', '\\"')
            lines.append(f'abstract: "{escaped}"')
        if options.creation_date is not None:
            lines.append(f'date: "{format_localized_date(options.creation_date, language)}"')

        if options.reference_files:
            lines.append("referencefile:")
            for file in options.reference_files:
                metadata = self._reference_metadata(file, language, "--")
                lines.append(f'  - filename: "{file.filename}"')
                lines.append(f'    metadata: "{metadata}"')

        if options.audio_files:
            lines.append("audiofile:")
            for file in options.audio_files:
                duration = self.format_duration(file.duration, language)
                lines.append(f'  - filename: "{file.filename}"')
                lines.append(f'    metadata: "{duration}"')

        return "\n".join(lines) + "\n"