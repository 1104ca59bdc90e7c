from abc import ABC, abstractmethod

from quickdrop.schemas.transfer_event import TransferEvent, TransferEventIn


class StorageError(Exception):
    """Raised when the underlying database rejects or fails an operation."""


class AbstractLogStore(ABC):
    @abstractmethod
    async def insert(self, event: TransferEventIn) -> int: ...

    @abstractmethod
    async def list_recent(self, limit: int) -> list[TransferEvent]: ...
