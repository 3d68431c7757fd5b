"""In-memory row source for callers that already hold the rows."""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from . import RowSource, register_source


@register_source("memory")
class MemorySource(RowSource):
    """Rows already held in memory, e.g. fetched by the web layer."""

    def __init__(self,
                 relationships: Optional[Sequence[Mapping[str, Any]]] = None,
                 providers: Optional[Sequence[Mapping[str, Any]]] = None,
                 payers: Optional[Sequence[Mapping[str, Any]]] = None,
                 strict: bool = True):
        super().__init__(strict=strict)
        self._rows = {
            "relationships": list(relationships or []),
            "providers": list(providers or []),
            "payers": list(payers or []),
        }

    def read_rows(self) -> Dict[str, List[Mapping[str, Any]]]:
        return {key: list(rows) for key, rows in self._rows.items()}
