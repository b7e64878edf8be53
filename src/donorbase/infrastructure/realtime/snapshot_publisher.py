"""Builds full document snapshots and hands them to the SnapshotHub.

Publishing happens after a successful commit. A failure to build or deliver
a snapshot is logged and never fails the write that triggered it.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from donorbase.core.logging import get_logger
from donorbase.infrastructure.persistence.repositories import (
    DonationRepository,
    DonorFormRepository,
    EventRepository,
)
from donorbase.infrastructure.realtime.snapshot_hub import (
    TOPIC_DONATIONS,
    TOPIC_EVENT,
    TOPIC_SCHEMA,
    SnapshotHub,
    topic_for,
)

logger = get_logger(__name__)


def snapshot_message(kind: str, data: Any) -> dict[str, Any]:
    return {
        "type": f"{kind}.snapshot",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "data": data,
    }


class SnapshotPublisher:
    """Publishes the current state of an event's documents."""

    def __init__(self, hub: SnapshotHub) -> None:
        self.hub = hub

    async def build_snapshot(
        self, session: AsyncSession, event_id: str, kind: str
    ) -> dict[str, Any]:
        """Read one document of an event and wrap it as a snapshot message.

        A deleted event yields a snapshot with ``data`` set to None.
        """
        if kind == TOPIC_EVENT:
            event = await EventRepository(session).get_by_id(event_id)
            data = event.to_entity().to_public_document() if event else None
        elif kind == TOPIC_SCHEMA:
            form = await DonorFormRepository(session).get_by_event_id(event_id)
            data = (
                {
                    "eventId": event_id,
                    "version": form.version,
                    "fields": [f.to_document() for f in form.custom_fields()],
                }
                if form
                else None
            )
        elif kind == TOPIC_DONATIONS:
            donations = await DonationRepository(session).list_by_event(event_id)
            data = [d.to_entity().to_document() for d in donations]
        else:
            raise ValueError(f"Unknown snapshot kind '{kind}'")
        return snapshot_message(kind, data)

    async def publish(self, session: AsyncSession, event_id: str, *kinds: str) -> None:
        """Publish fresh snapshots of the given kinds to their topics."""
        for kind in kinds:
            topic = topic_for(event_id, kind)
            if self.hub.subscriber_count(topic) == 0:
                continue
            try:
                snapshot = await self.build_snapshot(session, event_id, kind)
            except Exception as e:
                logger.error(
                    "Failed to build snapshot",
                    event_id=event_id,
                    kind=kind,
                    error=str(e),
                )
                continue
            delivered = self.hub.publish(topic, snapshot)
            logger.debug("Snapshot published", topic=topic, subscribers=delivered)
