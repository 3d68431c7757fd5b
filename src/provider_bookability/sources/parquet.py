"""Parquet row source: one exported table per row kind in a directory."""

from pathlib import Path
from typing import Any, Dict, List, Mapping

import pyarrow.parquet as pq

from . import RowSource, register_source
from ..utils.backoff_logger import get_logger

logger = get_logger(__name__)

TABLES = {
    "relationships": "relationships.parquet",
    "providers": "providers.parquet",
    "payers": "payers.parquet",
}


@register_source("parquet")
class ParquetSource(RowSource):
    """Directory of parquet exports, one file per table."""

    def __init__(self, path: str, strict: bool = True):
        super().__init__(strict=strict)
        self.path = Path(path)

    def read_rows(self) -> Dict[str, List[Mapping[str, Any]]]:
        rows = {}
        for section, filename in TABLES.items():
            file_path = self.path / filename
            if not file_path.exists():
                logger.warning("parquet_table_missing", table=section, path=str(file_path))
                rows[section] = []
                continue
            rows[section] = pq.read_table(file_path).to_pylist()
        return rows
