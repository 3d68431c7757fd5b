"""JSON and YAML snapshot documents.

Both formats use one top-level object::

    relationships: [...]
    providers: [...]
    payers: [...]
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

from . import RowSource, register_source

SECTIONS = ("relationships", "providers", "payers")


def _sections(document: Any, path: Path) -> Dict[str, List[Mapping[str, Any]]]:
    if not isinstance(document, dict):
        raise ValueError(f"{path}: root structure is not an object")
    rows = {}
    for section in SECTIONS:
        value = document.get(section) or []
        if not isinstance(value, list):
            raise ValueError(f"{path}: '{section}' must be a list, got {type(value).__name__}")
        rows[section] = value
    return rows


@register_source("json")
class JsonSource(RowSource):
    """Snapshot stored as a JSON document."""

    def __init__(self, path: str, strict: bool = True):
        super().__init__(strict=strict)
        self.path = Path(path)

    def read_rows(self) -> Dict[str, List[Mapping[str, Any]]]:
        with open(self.path, "r", encoding="utf-8") as f:
            return _sections(json.load(f), self.path)


@register_source("yaml")
class YamlSource(RowSource):
    """Snapshot stored as a YAML document, handy for hand-written fixtures."""

    def __init__(self, path: str, strict: bool = True):
        super().__init__(strict=strict)
        self.path = Path(path)

    def read_rows(self) -> Dict[str, List[Mapping[str, Any]]]:
        with open(self.path, "r", encoding="utf-8") as f:
            return _sections(yaml.safe_load(f) or {}, self.path)
