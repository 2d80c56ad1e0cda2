"""
Fixed grammar of the sensor-log format and of the converted output.

This file exists to make non-goals explicit and enforceable:
only E001 (skip) and E004 (bundle start) are recognized record tags.
"""

TAG_SKIP = "E001"
TAG_BUNDLE_START = "E004"

FIELD_DELIMITER = ":"
DATE_RANGE_DELIMITER = "-"
OUTPUT_DELIMITER = ";"

BUNDLE_LINES = 3  # start line, date line, value line

# value line: tag, one unused slot, then the value pairs
VALUE_FIELDS_START = 2

TIME_UNIT_HOUR = "H"
TIME_UNIT_MONTH = "M"

# yyyyMMddHHmm, seconds are always 0 and never rendered
TIMESTAMP_DIGITS = 12

CONVERTED_SUFFIX = "_CONVERTED.txt"
TARGET_ENCODING = "utf-8"
