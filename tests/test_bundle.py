from datetime import datetime

import pytest

from logconv.bundle import pair_values, parse_bundle, parse_timestamp
from logconv.errors import FormatError, InvalidTimestamp, MalformedBundle, UnrecognizedTimeUnit
from logconv.models import TimeUnit, ValuePair


def test_parse_bundle_fields():
    lines = [
        "E001:skip me",
        "E004:S1",
        "X:201701010800-201701020800:H",
        "X:IGNORED:10:20:30:40",
    ]
    bundle = parse_bundle(lines, 1)

    assert bundle.start_index == 1
    assert bundle.sensor_id == "S1"
    assert bundle.start_timestamp == datetime(2017, 1, 1, 8, 0, 0)
    assert bundle.time_unit is TimeUnit.HOUR
    assert bundle.values == [ValuePair(value1="10", value2="20"), ValuePair(value1="30", value2="40")]


def test_month_unit_and_odd_value_count():
    lines = ["E004:S9", "X:201701310000:M", "X:a:1:2:3"]
    bundle = parse_bundle(lines, 0)

    assert bundle.time_unit is TimeUnit.MONTH
    # trailing "3" has no partner
    assert bundle.values == [ValuePair(value1="1", value2="2")]


def test_pair_values_drops_trailing_field():
    assert pair_values([]) == []
    assert pair_values(["1"]) == []
    assert len(pair_values(["1", "2", "3", "4", "5"])) == 2


@pytest.mark.parametrize("token", ["20170101080", "2017010108000", "2017O1010800", "", "201713010800", "201702300800"])
def test_parse_timestamp_rejects_malformed(token):
    with pytest.raises(InvalidTimestamp):
        parse_timestamp(token)


def test_missing_body_lines():
    with pytest.raises(MalformedBundle) as exc:
        parse_bundle(["E004:S1"], 0)
    assert exc.value.line_index == 1

    with pytest.raises(MalformedBundle) as exc:
        parse_bundle(["E004:S1", "X:201701010800:H"], 0)
    assert exc.value.line_index == 2


def test_insufficient_fields():
    with pytest.raises(MalformedBundle) as exc:
        parse_bundle(["E004", "X:201701010800:H", "X:1:2"], 0)
    assert exc.value.line_index == 0

    with pytest.raises(MalformedBundle) as exc:
        parse_bundle(["E004:S1", "X:201701010800", "X:1:2"], 0)
    assert exc.value.line_index == 1


def test_start_line_must_be_bundle_start():
    with pytest.raises(MalformedBundle):
        parse_bundle(["E001:S1", "X:201701010800:H", "X:1:2"], 0)


def test_bad_date_reports_date_line():
    with pytest.raises(InvalidTimestamp) as exc:
        parse_bundle(["E004:S1", "X:notadate:H", "X:1:2"], 0)
    assert exc.value.line_index == 1
    assert "line 1" in str(exc.value)


@pytest.mark.parametrize("unit", ["D", "h", "", "HOUR"])
def test_unrecognized_time_unit(unit):
    with pytest.raises(UnrecognizedTimeUnit) as exc:
        parse_bundle(["E004:S1", f"X:201701010800:{unit}", "X:1:2"], 0)
    assert isinstance(exc.value, FormatError)
    assert exc.value.line_index == 1
