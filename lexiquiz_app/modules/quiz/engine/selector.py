"""
Distractor Selector for MCQ Generation.
================================================
Picks plausible wrong answers for a target item: same topic, same grammar
category, similar sound. Reproducible when a random source is injected.

Pure logic: no Database access, no Flask.
"""

import random
from typing import Callable, Iterable, List, Mapping, NamedTuple, Optional, Sequence

from ..constants import DistractorRules
from ..schemas import Item


class _ScoredCandidate(NamedTuple):
    same_cluster: int
    same_part_of_speech: int
    transliteration_similarity: int
    fallback_random: float
    item: Item


class DistractorSelector:
    """
    Selects distractors (wrong answers) for a multiple-choice question.

    Algorithm Pipeline:
        1. Fetch (handled by caller: provide the candidate pool).
        2. Scoring - cluster overlap, part of speech, pronunciation prefix.
        3. Ordering - score desc, then injected random draw, then id.
        4. Selection - first `count` unique candidates, target excluded.
    """

    @classmethod
    def choose(
        cls,
        target: Item,
        pool: Sequence[Item],
        cluster_membership: Optional[Mapping[int, Iterable[int]]] = None,
        count: int = DistractorRules.DEFAULT_COUNT,
        random_source: Optional[Callable[[], float]] = None,
    ) -> List[Item]:
        """
        Main pipeline to choose distractors.

        Args:
            target: The item being asked about.
            pool: Candidate items (may contain the target and duplicates).
            cluster_membership: item_id -> cluster ids. Items missing from the
                mapping fall back to their own cluster_ids.
            count: Number of distractors wanted.
            random_source: Zero-arg callable returning floats in [0, 1).
                Inject a seeded one (e.g. random.Random(7).random) for replay.
        """
        if not pool or count <= 0:
            return []

        draw = random_source or random.random
        membership = cluster_membership or {}
        target_clusters = cls._clusters_of(target, membership)

        # Step 2: Scoring
        scored = [
            cls._score(target, target_clusters, candidate, membership, draw())
            for candidate in pool
            if candidate.id != target.id
        ]

        # Step 3: Ordering
        scored.sort(key=lambda c: (
            -c.same_cluster,
            -c.same_part_of_speech,
            -c.transliteration_similarity,
            c.fallback_random,
            c.item.id,
        ))

        # Step 4: Selection
        chosen: List[Item] = []
        used = {target.id}
        for candidate in scored:
            if candidate.item.id in used:
                continue
            used.add(candidate.item.id)
            chosen.append(candidate.item)
            if len(chosen) >= count:
                break
        return chosen

    # ------------------------------------------------------------------ #
    #  Step 2: Scoring                                                     #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _clusters_of(item: Item, membership: Mapping[int, Iterable[int]]) -> frozenset:
        if item.id in membership:
            return frozenset(membership[item.id])
        return frozenset(item.cluster_ids or ())

    @staticmethod
    def transliteration_similarity(a: Optional[str], b: Optional[str]) -> int:
        """Length of the common case-insensitive prefix."""
        x = (a or "").lower()
        y = (b or "").lower()
        length = 0
        for left, right in zip(x, y):
            if left != right:
                break
            length += 1
        return length

    @classmethod
    def _score(
        cls,
        target: Item,
        target_clusters: frozenset,
        candidate: Item,
        membership: Mapping[int, Iterable[int]],
        fallback_random: float,
    ) -> _ScoredCandidate:
        same_cluster = 1 if target_clusters & cls._clusters_of(candidate, membership) else 0
        same_pos = 1 if candidate.part_of_speech == target.part_of_speech else 0
        return _ScoredCandidate(
            same_cluster=same_cluster,
            same_part_of_speech=same_pos,
            transliteration_similarity=cls.transliteration_similarity(
                candidate.transliteration, target.transliteration
            ),
            fallback_random=fallback_random,
            item=candidate,
        )
