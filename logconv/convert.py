"""
Conversion driver and file I/O.

Responsibilities:
- single left-to-right scan that dispatches on record tags
- bundle parse + time-series expansion, accumulated in memory
- output naming (<base>_CONVERTED.txt)
- atomic write: temp file in the target directory, renamed on success
"""

from __future__ import annotations

import io
import logging
import os
import re
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from charset_normalizer import from_bytes

from .bundle import parse_bundle
from .classify import classify
from .config import ConverterSettings, load_settings
from .errors import FormatError, InputNotFound, OutputWriteFailure
from .expand import expand
from .logger import get_logger
from .models import ConversionReport, OutputRow, RecordTag, ReportItem
from .rules import BUNDLE_LINES, CONVERTED_SUFFIX

logger = logging.getLogger("logconv.convert")

_PATH_SEP_RE = re.compile(r"[\\/]")


@dataclass
class ConversionResult:
    rows: List[OutputRow] = field(default_factory=list)
    report: ConversionReport = field(default_factory=ConversionReport)

    def lines(self) -> List[str]:
        return render_rows(self.rows)


def render_rows(rows: Iterable[OutputRow]) -> List[str]:
    """Render rows, dropping any blank or whitespace-only result."""
    rendered = (row.render() for row in rows)
    return [line for line in rendered if line.strip()]


def convert_lines(lines: Sequence[str], settings: Optional[ConverterSettings] = None) -> ConversionResult:
    settings = settings or ConverterSettings()
    result = ConversionResult()
    summary = result.report.summary
    summary.lines = len(lines)
    summary.strict = settings.strict

    i = 0
    while i < len(lines):
        tag = classify(lines[i])

        if tag is RecordTag.SKIP:
            summary.skipped_lines += 1
            i += 1
            continue

        if tag is RecordTag.OTHER:
            summary.other_lines += 1
            i += 1
            continue

        try:
            bundle = parse_bundle(lines, i)
            rows = list(expand(bundle))
        except FormatError as e:
            if settings.strict:
                raise
            logger.warning("Skipping bundle at line %d: %s", i, e)
            result.report.warnings.append(ReportItem(
                line=e.line_index,
                issue=e.kind,
                value=e.line,
                action=f"skipped_bundle_at_{i}",
            ))
            # a truncated bundle at the end of input only owns its start line
            i += BUNDLE_LINES if i + BUNDLE_LINES <= len(lines) else 1
            continue

        result.rows.extend(rows)
        summary.bundles += 1
        logger.debug("Bundle at line %d: sensor=%s rows=%d", i, bundle.sensor_id, len(rows))
        i += BUNDLE_LINES

    summary.rows = len(result.rows)
    summary.warnings = len(result.report.warnings)
    return result


def split_lines(text: str) -> List[str]:
    """Split on CR, LF and CRLF only; unlike str.splitlines(), \\x1c, \\x85 etc. stay in the line."""
    return [line.rstrip("\n") for line in io.StringIO(text, newline=None)]


def convert_text(text: str, settings: Optional[ConverterSettings] = None) -> ConversionResult:
    return convert_lines(split_lines(text), settings)


def decode_bytes(raw: bytes) -> tuple[str, str, bool]:
    """
    Decode uploaded bytes.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - If decode with the guess fails, fall back to UTF-8.
    - Last resort: decode with replacement characters and flag it.
    Returns (text, encoding_used, fallback_used).
    """
    match = from_bytes(raw).best()
    decode_used = match.encoding if match is not None else "utf-8"
    # utf-8 with BOM: decode with utf-8-sig so the BOM does not end up in the first tag
    if raw.startswith(b"\xef\xbb\xbf") and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    try:
        return raw.decode(decode_used), decode_used, False
    except (UnicodeDecodeError, LookupError):
        pass
    try:
        return raw.decode("utf-8"), "utf-8", True
    except UnicodeDecodeError:
        return raw.decode("utf-8", errors="replace"), "utf-8", True


def convert_bytes(raw: bytes, settings: Optional[ConverterSettings] = None) -> ConversionResult:
    text, decode_used, fallback = decode_bytes(raw)
    result = convert_text(text, settings)
    if fallback:
        result.report.warnings.append(ReportItem(
            issue="decode_fallback",
            value=decode_used,
            action="decoded_with_replacement",
        ))
        result.report.summary.warnings = len(result.report.warnings)
    return result


def converted_filename(input_path: str, suffix: Optional[str] = None) -> str:
    """<name>_CONVERTED.txt, where name is the file name up to its first dot."""
    basename = _PATH_SEP_RE.split(str(input_path))[-1]
    return f"{basename.split('.')[0]}{suffix or CONVERTED_SUFFIX}"


def read_lines(input_path: str, encoding: str) -> List[str]:
    try:
        with open(input_path, "r", encoding=encoding, newline=None) as f:
            return [line.rstrip("\n") for line in f]
    except FileNotFoundError as e:
        raise InputNotFound(f"input file not found: {input_path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise InputNotFound(f"cannot read {input_path}: {e}") from e


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_rows(path: Path, lines: Sequence[str], settings: ConverterSettings) -> None:
    """
    Write lines to `path` atomically.

    Lines go to a temp file next to the destination, which replaces `path`
    only once everything is written; the temp file is removed otherwise.
    """
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding=settings.output_encoding, newline="") as f:
            for line in lines:
                f.write(line)
                f.write(settings.line_terminator)
        # mkstemp creates 0600; a converted file gets the umask like any other
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, path)
    except BaseException as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        if isinstance(e, OSError):
            raise OutputWriteFailure(f"cannot write {path}: {e}") from e
        raise


def convert(input_path: str, output_directory: str, settings: Optional[ConverterSettings] = None) -> None:
    """
    Convert the log at `input_path` into `<output_directory>/<name>_CONVERTED.txt`.

    The whole input is converted in memory before anything is written, so a
    failing run leaves no output file behind.
    """
    settings = settings or load_settings()
    get_logger("logconv", level=settings.log_level, log_dir=settings.log_dir)

    lines = read_lines(input_path, settings.input_encoding)
    result = convert_lines(lines, settings)

    out_dir = Path(output_directory)
    if not out_dir.is_dir():
        raise OutputWriteFailure(f"output directory does not exist: {output_directory}")
    out_path = out_dir / converted_filename(input_path, settings.output_suffix)
    write_rows(out_path, result.lines(), settings)

    summary = result.report.summary
    logger.info(
        "Converted %s -> %s (%d bundles, %d rows, %d warnings)",
        input_path, out_path, summary.bundles, summary.rows, summary.warnings,
    )
