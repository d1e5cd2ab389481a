from abc import ABC, abstractmethod
from typing import Optional

from tenant_lifecycle.domain.entities import ProcessedEvent


class IProcessedEventRepository(ABC):
    """Processed billing event ledger interface - application layer"""

    @abstractmethod
    async def get_by_event_id(self, event_id: str) -> Optional[ProcessedEvent]:
        """Get ledger row by provider event ID"""
        pass

    @abstractmethod
    async def create(self, processed_event: ProcessedEvent) -> ProcessedEvent:
        """Record an event as processed"""
        pass
