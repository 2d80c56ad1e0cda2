from __future__ import annotations

from .models import RecordTag
from .rules import FIELD_DELIMITER, TAG_BUNDLE_START, TAG_SKIP

_TAGS = {
    TAG_SKIP: RecordTag.SKIP,
    TAG_BUNDLE_START: RecordTag.BUNDLE_START,
}


def line_tag(line: str) -> str:
    return line.split(FIELD_DELIMITER, 1)[0]


def classify(line: str) -> RecordTag:
    """Map the first colon field of a line to its record tag (case-insensitive)."""
    return _TAGS.get(line_tag(line).upper(), RecordTag.OTHER)
