"""Badge issuance service.

Issues reputation badges to the roles of a certified turnaround. The
service works from the audit log alone: it replays the log to learn the
final task outcomes and role identities, so it needs no access to the live
aggregate.

A role earns a badge when it completed at least one task, has no
unjustified late task, and has an identity assigned. At most one badge is
issued per (turnaround, role); running issuance again only issues what is
still missing.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime

from turnaround.application.ports.audit_log import AuditLogProtocol
from turnaround.application.ports.badge_issuer import (
    BadgeIssuerProtocol,
    BadgeRepositoryProtocol,
)
from turnaround.application.services.base import LoggingMixin
from turnaround.application.services.turnaround_service import utc_now
from turnaround.domain.errors.turnaround import (
    TurnaroundNotCertifiedError,
    TurnaroundNotFoundError,
)
from turnaround.domain.events.turnaround import BadgeIssuedPayload
from turnaround.domain.models.badge import BadgeRecord
from turnaround.domain.services.audit_replay import replay_audit_log


class BadgeIssuanceService(LoggingMixin):
    """Issues badges for certified turnarounds."""

    def __init__(
        self,
        audit_log: AuditLogProtocol,
        issuer: BadgeIssuerProtocol,
        badges: BadgeRepositoryProtocol,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._audit_log = audit_log
        self._issuer = issuer
        self._badges = badges
        self._clock = clock
        self._lock = asyncio.Lock()
        self._init_logger()

    async def issue_badges(self, turnaround_id: str) -> list[BadgeRecord]:
        """Issue every badge still owed for a certified turnaround.

        Args:
            turnaround_id: The turnaround to issue for.

        Returns:
            Badges issued by this call (empty when all were issued before).

        Raises:
            TurnaroundNotFoundError: If the log holds no such turnaround.
            TurnaroundNotCertifiedError: If the turnaround is not sealed.
            AuditChainBrokenError: If the log does not verify.
        """
        log = self._log_operation("issue_badges", turnaround_id=turnaround_id)

        async with self._lock:
            records = await self._audit_log.read(turnaround_id)
            if not records:
                raise TurnaroundNotFoundError(turnaround_id)
            checklist = replay_audit_log(records)
            if not checklist.is_certified:
                log.warning("badge_issuance_rejected_not_certified")
                raise TurnaroundNotCertifiedError(turnaround_id)

            issued: list[BadgeRecord] = []
            for performance in checklist.get_actor_performance():
                if not performance.badge_eligible:
                    continue
                if performance.identity is None:
                    log.info("badge_skipped_unassigned_role", actor=performance.actor.value)
                    continue
                if await self._badges.get(turnaround_id, performance.actor) is not None:
                    continue

                now = self._clock()
                badge = await self._issuer.mint(
                    turnaround_id, performance.actor, performance.identity, now
                )
                await self._badges.save(badge)
                await self._audit_log.append(turnaround_id, BadgeIssuedPayload(badge=badge), now)
                issued.append(badge)
                log.info(
                    "badge_issued",
                    actor=badge.actor.value,
                    identity=badge.identity,
                    token_id=badge.token_id,
                )

        log.info("badge_issuance_completed", issued_count=len(issued))
        return issued

    async def list_badges(self, turnaround_id: str) -> list[BadgeRecord]:
        return await self._badges.list_for_turnaround(turnaround_id)
