from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_lifecycle.app.repositories.processed_event_repository import (
    IProcessedEventRepository,
)
from tenant_lifecycle.domain.entities import ProcessedEvent


class ProcessedEventRepository(IProcessedEventRepository):
    """Processed billing event ledger implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_event_id(self, event_id: str) -> Optional[ProcessedEvent]:
        """Get ledger row by provider event ID"""
        stmt = select(ProcessedEvent).where(ProcessedEvent.event_id == event_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, processed_event: ProcessedEvent) -> ProcessedEvent:
        """Record an event; a second insert of the same id fails on flush"""
        self.session.add(processed_event)
        await self.session.flush()
        return processed_event
