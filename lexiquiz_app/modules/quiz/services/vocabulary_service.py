from typing import Dict, FrozenSet, Iterable, List, Optional

from lexiquiz_app.db_instance import db
from lexiquiz_app.models import Cluster, VocabularyItem, item_clusters

from ..schemas import Item


class VocabularyService:
    """Read-only access to the item pool, returned as engine snapshots."""

    @staticmethod
    def list_items(
        cluster_id: Optional[int] = None,
        audio_only: bool = False,
        limit: Optional[int] = None
    ) -> List[Item]:
        query = VocabularyItem.query
        if cluster_id is not None:
            query = query.filter(VocabularyItem.clusters.any(Cluster.cluster_id == cluster_id))
        if audio_only:
            query = query.filter(VocabularyItem.audio_url.isnot(None), VocabularyItem.audio_url != '')
        query = query.order_by(VocabularyItem.item_id)
        if limit:
            query = query.limit(limit)
        return [row.to_engine_item() for row in query.all()]

    @staticmethod
    def cluster_membership(item_ids: Iterable[int]) -> Dict[int, FrozenSet[int]]:
        """item_id -> cluster ids; items without clusters map to an empty set."""
        item_ids = list(item_ids)
        if not item_ids:
            return {}
        membership: Dict[int, set] = {item_id: set() for item_id in item_ids}
        rows = db.session.execute(
            db.select(item_clusters.c.item_id, item_clusters.c.cluster_id)
            .where(item_clusters.c.item_id.in_(item_ids))
        ).all()
        for item_id, cluster_id in rows:
            membership[item_id].add(cluster_id)
        return {item_id: frozenset(clusters) for item_id, clusters in membership.items()}
