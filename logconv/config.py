from __future__ import annotations

import os
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from .rules import CONVERTED_SUFFIX, TARGET_ENCODING

CONFIG_ENV_VAR = "LOGCONV_CONFIG"


class ConverterSettings(BaseModel):
    strict: bool = True
    # utf-8-sig also reads plain utf-8 and keeps a BOM out of the first tag
    input_encoding: str = "utf-8-sig"
    output_encoding: str = TARGET_ENCODING
    line_terminator: str = Field(default="\n")
    output_suffix: str = CONVERTED_SUFFIX
    log_level: str = "INFO"
    log_dir: Optional[str] = None


def load_yaml(path: str) -> dict:
    if not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_settings(path: Optional[str] = None, **overrides) -> ConverterSettings:
    """
    Build settings from a YAML file.

    The file is `path`, else $LOGCONV_CONFIG; a missing file means defaults.
    Keyword overrides that are not None win over the file.
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    data = load_yaml(path) if path else {}
    data.update({k: v for k, v in overrides.items() if v is not None})
    return ConverterSettings(**data)
