"""Expire stale invitations use case."""

import logging
from datetime import UTC, datetime

logger = logging.getLogger(__name__)


class ExpireInvitationsUseCase:
    """Move PENDING invitations past their expiry to EXPIRED.

    Housekeeping only: acceptance checks expiry itself, so correctness never
    depends on this sweep having run.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, now: datetime | None = None) -> int:
        now = now or datetime.now(UTC)
        async with self._uow_factory() as uow:
            count = await uow.invitations.expire_stale(now)
        if count:
            logger.info("Expired %d stale invitations", count)
        return count
