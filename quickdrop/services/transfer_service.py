from quickdrop.schemas.transfer_event import TransferEvent, TransferEventIn
from quickdrop.store.base import AbstractLogStore


class TransferLogService:
    def __init__(self, store: AbstractLogStore, recent_limit: int = 100) -> None:
        self.store = store
        self.recent_limit = recent_limit

    async def record(self, event: TransferEventIn) -> int:
        return await self.store.insert(event)

    async def recent(self) -> list[TransferEvent]:
        return await self.store.list_recent(self.recent_limit)
