"""Row source plugin system.

A row source is a dumb reader: it returns every relationship, provider and
payer row it holds, parsed into a :class:`Snapshot`. It never applies date or
status rules.
"""

from typing import Any, Dict, Iterable, List, Mapping, Type

from ..errors import UnknownSourceError
from ..models import Snapshot
from ..schema.rows import RowValidator
from ..utils.backoff_logger import get_logger

logger = get_logger(__name__)


class RowSource:
    """Base class for row sources."""

    name = "base"

    def __init__(self, strict: bool = True):
        self.strict = strict
        self.validator = RowValidator()
        self.rejected: List[Any] = []

    def read_rows(self) -> Dict[str, List[Mapping[str, Any]]]:
        """Return raw rows keyed by ``relationships``, ``providers`` and ``payers``."""
        raise NotImplementedError

    def read_snapshot(self) -> Snapshot:
        """Read and parse one consistent snapshot.

        In strict mode the first unclassifiable row raises
        :class:`~provider_bookability.errors.InvalidRowError`; otherwise bad
        rows are collected on ``self.rejected`` and skipped.
        """
        rows = self.read_rows()
        self.rejected = []
        snapshot = Snapshot(
            relationships=tuple(self._parse("relationship", rows.get("relationships") or [])),
            providers=tuple(self._parse("provider", rows.get("providers") or [])),
            payers=tuple(self._parse("payer", rows.get("payers") or [])),
        )
        logger.info(
            "snapshot_read",
            source=self.name,
            relationships=len(snapshot.relationships),
            providers=len(snapshot.providers),
            payers=len(snapshot.payers),
            rejected=len(self.rejected),
        )
        return snapshot

    def _parse(self, kind: str, rows: Iterable[Mapping[str, Any]]) -> List[Any]:
        if self.strict:
            return self.validator.parse_all(kind, rows)
        parsed, rejected = self.validator.partition(kind, rows)
        self.rejected.extend(rejected)
        return parsed


_source_registry: Dict[str, Type[RowSource]] = {}


def register_source(name: str):
    """Decorator to register a row source under ``name``."""
    def wrapper(cls: Type[RowSource]):
        cls.name = name.lower()
        _source_registry[name.lower()] = cls
        return cls
    return wrapper


def get_source(name: str, **options) -> RowSource:
    """Return a row source instance for ``name``.

    Raises:
        UnknownSourceError: if nothing is registered under ``name``
    """
    cls = _source_registry.get(name.lower())
    if cls is None:
        raise UnknownSourceError(name, _source_registry.keys())
    return cls(**options)


def available_sources() -> List[str]:
    return sorted(_source_registry)


# Import built-in sources to register them
from . import memory  # noqa: E402,F401
from . import document  # noqa: E402,F401
from . import parquet  # noqa: E402,F401
