import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import structlog

from core.errors import CleanupError
from utils.storage import StagingArea

logger = structlog.get_logger(__name__)


@dataclass
class PendingDeletion:
    id: str
    paths: List[Path]
    due_at: datetime
    task: Optional[asyncio.Task] = field(default=None, repr=False, compare=False)


class CleanupScheduler:
    """Deletes staged files a fixed delay after they were produced.

    Pending deletions live in memory only. Shutting down cancels them, so files
    staged shortly before a restart stay on disk.
    """

    def __init__(self, storage: StagingArea, delay_seconds: float):
        self.storage = storage
        self.delay_seconds = delay_seconds
        self._pending: Dict[str, PendingDeletion] = {}

    def schedule(self, paths: Sequence, delay_seconds: Optional[float] = None) -> PendingDeletion:
        delay = self.delay_seconds if delay_seconds is None else delay_seconds
        entry = PendingDeletion(
            id=uuid.uuid4().hex,
            paths=[Path(p) for p in paths],
            due_at=datetime.now(timezone.utc) + timedelta(seconds=delay),
        )
        entry.task = asyncio.get_running_loop().create_task(self._delete_later(entry, delay))
        self._pending[entry.id] = entry
        logger.info("cleanup_scheduled", cleanup_id=entry.id,
                    paths=[str(p) for p in entry.paths], due_at=entry.due_at.isoformat())
        return entry

    def pending(self) -> List[PendingDeletion]:
        return sorted(self._pending.values(), key=lambda e: e.due_at)

    async def _delete_later(self, entry: PendingDeletion, delay: float) -> None:
        await asyncio.sleep(delay)
        self.run(entry.id)

    def run(self, cleanup_id: str) -> int:
        """Delete the files of one pending entry now. Returns how many were removed."""
        entry = self._pending.pop(cleanup_id, None)
        if entry is None:
            return 0
        removed = 0
        for path in entry.paths:
            try:
                if self.storage.remove(path):
                    removed += 1
                else:
                    logger.warning("cleanup_file_missing", cleanup_id=cleanup_id, path=str(path))
            except CleanupError as e:
                logger.error("cleanup_failed", cleanup_id=cleanup_id, path=e.path, reason=e.reason)
        logger.info("cleanup_executed", cleanup_id=cleanup_id, removed=removed)
        return removed

    async def shutdown(self) -> None:
        entries = list(self._pending.values())
        self._pending.clear()
        for entry in entries:
            if entry.task is not None:
                entry.task.cancel()
        if entries:
            await asyncio.gather(*(e.task for e in entries if e.task is not None),
                                 return_exceptions=True)
            logger.warning("cleanup_abandoned", count=len(entries),
                           paths=[str(p) for e in entries for p in e.paths])
