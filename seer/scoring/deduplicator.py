"""Turns raw items into opportunities, at most once per external item."""

import logging
from dataclasses import dataclass

from seer.alerts.notifier import AlertNotifier
from seer.ingestion.schemas import RawItem
from seer.opportunities.repository import OpportunityRepository
from seer.opportunities.schemas import Opportunity
from seer.scoring.scorer import Scorer

logger = logging.getLogger(__name__)


@dataclass
class DedupStats:
    created: int = 0
    duplicates: int = 0
    filtered: int = 0
    alerted: int = 0


class Deduplicator:
    """Filter, score and insert-or-ignore.

    Items already stored under the same ``(source_type, external_id)`` are
    discarded without touching the stored row. With a notifier attached,
    first sightings are handed to it after the batch is stored.
    """

    def __init__(
        self,
        repository: OpportunityRepository,
        scorer: Scorer,
        notifier: AlertNotifier | None = None,
    ) -> None:
        self._repo = repository
        self._scorer = scorer
        self._notifier = notifier

    @property
    def notifier(self) -> AlertNotifier | None:
        return self._notifier

    def build(self, item: RawItem) -> Opportunity:
        result = self._scorer.score(item)
        return Opportunity(
            source_id=item.source_id,
            title=item.title,
            description=item.body,
            source_type=item.source_type.value,
            source_url=item.url,
            source_id_external=item.external_id,
            score=result.score,
            signals=list(result.signals),
            metadata=item.metadata,
            published_at=item.published_at,
        )

    async def process(self, item: RawItem) -> Opportunity | None:
        """Store ``item`` on first sighting. Returns None if filtered or known."""
        if not self._scorer.accepts(item):
            return None
        stored = await self._repo.insert_if_absent(self.build(item))
        if stored is not None and self._notifier is not None:
            await self._notifier.notify([stored])
        return stored

    async def process_batch(self, items: list[RawItem]) -> DedupStats:
        stats = DedupStats()
        created: list[Opportunity] = []
        for item in items:
            if not self._scorer.accepts(item):
                stats.filtered += 1
                continue

            stored = await self._repo.insert_if_absent(self.build(item))
            if stored is None:
                stats.duplicates += 1
            else:
                stats.created += 1
                created.append(stored)

        if created and self._notifier is not None:
            stats.alerted = await self._notifier.notify(created)

        logger.debug(
            "Processed %d items: created=%d duplicates=%d filtered=%d alerted=%d",
            len(items), stats.created, stats.duplicates, stats.filtered, stats.alerted,
        )
        return stats
