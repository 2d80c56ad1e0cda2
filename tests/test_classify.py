import pytest

from logconv.classify import classify
from logconv.models import RecordTag


@pytest.mark.parametrize("line,expected", [
    ("E001:anything", RecordTag.SKIP),
    ("e001:lower case", RecordTag.SKIP),
    ("E004:S1", RecordTag.BUNDLE_START),
    ("e004:S1", RecordTag.BUNDLE_START),
    ("E002:other", RecordTag.OTHER),
    ("X:201701010800:H", RecordTag.OTHER),
])
def test_classify_tags(line, expected):
    assert classify(line) is expected


def test_line_without_colon_is_its_own_tag():
    assert classify("E004") is RecordTag.BUNDLE_START
    assert classify("no delimiter here") is RecordTag.OTHER
    assert classify("") is RecordTag.OTHER
