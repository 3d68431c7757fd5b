"""Relationship loader: candidate relationships for a scope, no date rules."""

from typing import List, Optional, Tuple

from ..models import Relationship, Scope, Snapshot
from ..sources import RowSource
from ..utils.backoff_logger import get_logger

logger = get_logger(__name__)


def load_relationships(snapshot: Snapshot, scope: Optional[Scope] = None) -> List[Relationship]:
    """Return the relationships of ``snapshot`` that fall inside ``scope``.

    Provider scope matches ``provider_id``, which for supervised rows is the
    rendering provider. Orphaned ids are passed through untouched; the
    temporal filter and normalizer surface them.

    Args:
        snapshot: parsed rows read at one point in time
        scope: provider and/or payer selector; ``None`` means the full catalog

    Returns:
        Matching relationships in snapshot order (possibly empty)
    """
    scope = scope or Scope()
    if scope.is_catalog:
        selected = list(snapshot.relationships)
    else:
        selected = [rel for rel in snapshot.relationships if scope.matches(rel)]

    logger.debug(
        "relationships_loaded",
        provider_id=scope.provider_id,
        payer_id=scope.payer_id,
        candidates=len(selected),
        total=len(snapshot.relationships),
    )
    return selected


class RelationshipLoader:
    """Reads one snapshot from a row source and serves scoped candidate sets."""

    def __init__(self, source: RowSource):
        self.source = source
        self._snapshot: Optional[Snapshot] = None

    @property
    def snapshot(self) -> Snapshot:
        if self._snapshot is None:
            self._snapshot = self.source.read_snapshot()
        return self._snapshot

    def refresh(self) -> Snapshot:
        """Discard the cached snapshot and read the source again."""
        self._snapshot = None
        return self.snapshot

    def load(self, scope: Optional[Scope] = None) -> Tuple[Snapshot, List[Relationship]]:
        snapshot = self.snapshot
        return snapshot, load_relationships(snapshot, scope)
