"""Vocabulary content models.

Items are owned by the content/review workflow; the quiz engines only ever
see them through the immutable `Item` snapshot returned by `to_engine_item`.
"""

from __future__ import annotations

from datetime import datetime, timezone

from ..db_instance import db


item_clusters = db.Table(
    'item_clusters',
    db.Column('item_id', db.Integer, db.ForeignKey('vocabulary_items.item_id'), primary_key=True),
    db.Column('cluster_id', db.Integer, db.ForeignKey('clusters.cluster_id'), primary_key=True),
)


class Cluster(db.Model):
    """Semantic grouping of items (topic, theme)."""

    __tablename__ = 'clusters'

    cluster_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, unique=True)
    description = db.Column(db.Text, nullable=True)


class VocabularyItem(db.Model):
    """A learnable word or phrase."""

    __tablename__ = 'vocabulary_items'

    item_id = db.Column(db.Integer, primary_key=True)
    source_text = db.Column(db.String(255), nullable=False)
    target_text = db.Column(db.String(255), nullable=False)
    transliteration = db.Column(db.String(255), nullable=False, default='')
    difficulty = db.Column(db.Integer, nullable=False, default=1)
    part_of_speech = db.Column(db.String(40), nullable=True)
    audio_url = db.Column(db.String(512), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    clusters = db.relationship(
        'Cluster',
        secondary=item_clusters,
        lazy='selectin',
        backref=db.backref('items', lazy='dynamic'),
    )

    def to_engine_item(self):
        from ..modules.quiz.schemas import Item

        return Item(
            id=self.item_id,
            source_text=self.source_text,
            target_text=self.target_text,
            transliteration=self.transliteration or '',
            difficulty=self.difficulty if self.difficulty is not None else 1,
            part_of_speech=self.part_of_speech,
            audio_url=self.audio_url,
            cluster_ids=frozenset(cluster.cluster_id for cluster in self.clusters),
        )
