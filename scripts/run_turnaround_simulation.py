#!/usr/bin/env python3
"""Drive one turnaround end to end against the in-memory adapters.

Creates a turnaround from the standard template, assigns every role,
completes each task (optionally late), certifies, issues badges and
prints the reporting projection built from the audit log.

Usage:
    python scripts/run_turnaround_simulation.py --late-task 5 --justify
    python scripts/run_turnaround_simulation.py --output report.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

from turnaround.application.services.badge_issuance_service import (  # noqa: E402
    BadgeIssuanceService,
)
from turnaround.application.services.reporting_projection_service import (  # noqa: E402
    ReportingProjectionService,
)
from turnaround.application.services.turnaround_service import (  # noqa: E402
    TurnaroundService,
)
from turnaround.bootstrap.logging import configure_logging  # noqa: E402
from turnaround.config.turnaround_config import TurnaroundConfig  # noqa: E402
from turnaround.domain.models.actor import Actor, Privilege  # noqa: E402
from turnaround.infrastructure.stubs import (  # noqa: E402
    AuditLogStub,
    BadgeIssuerStub,
    BadgeRepositoryStub,
    PrivilegeRegistryStub,
    TurnaroundRepositoryStub,
)

ADMIN_ID = "ops-admin"
SUPERVISOR_ID = "ops-supervisor"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate an aircraft turnaround")
    parser.add_argument("--turnaround-id", default="TA-SIM-0001")
    parser.add_argument("--airport", default="LIS", help="IATA airport code")
    parser.add_argument("--flight", default="TP1234", help="Flight number")
    parser.add_argument(
        "--arrival",
        default=None,
        help="Scheduled arrival (ISO 8601 with offset); defaults to now",
    )
    parser.add_argument(
        "--late-task",
        type=int,
        action="append",
        default=[],
        help="Task id to complete 10 minutes after its deadline (repeatable)",
    )
    parser.add_argument(
        "--justify",
        action="store_true",
        help="Justify every late task before certifying",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the report JSON here instead of stdout",
    )
    parser.add_argument(
        "--show-audit-log",
        action="store_true",
        help="Also print the audit log records",
    )
    return parser.parse_args(argv)


async def run_simulation(args: argparse.Namespace, config: TurnaroundConfig) -> dict:
    arrival = (
        datetime.fromisoformat(args.arrival)
        if args.arrival
        else datetime.now(timezone.utc).replace(second=0, microsecond=0)
    )
    if arrival.tzinfo is None:
        raise SystemExit("--arrival must include a timezone offset")

    privileges = PrivilegeRegistryStub()
    privileges.grant(ADMIN_ID, Privilege.ADMINISTRATIVE)
    privileges.grant(SUPERVISOR_ID, Privilege.OPERATIONAL)

    audit_log = AuditLogStub()
    policy = config.to_policy()
    service = TurnaroundService(
        repository=TurnaroundRepositoryStub(),
        audit_log=audit_log,
        privileges=privileges,
        policy=policy,
    )
    badges = BadgeIssuanceService(
        audit_log=audit_log,
        issuer=BadgeIssuerStub(config.badge_metadata_base_uri),
        badges=BadgeRepositoryStub(),
    )
    reporting = ReportingProjectionService(audit_log=audit_log, policy=policy)

    turnaround_id = args.turnaround_id
    checklist = await service.create_turnaround(
        off_chain_id=turnaround_id,
        airport_code=args.airport,
        scheduled_arrival=arrival,
        scheduled_departure=arrival + timedelta(minutes=60),
        caller_id=ADMIN_ID,
        flight_number=args.flight,
    )
    for actor in Actor:
        await service.assign_actor(
            turnaround_id, actor, f"{actor.value.lower()}-crew", ADMIN_ID
        )

    late_tasks = set(args.late_task)
    last_completion = arrival
    for task in checklist.list_tasks():
        if task.task_id in late_tasks:
            completed_at = task.deadline + timedelta(minutes=10)
        else:
            completed_at = task.deadline - timedelta(minutes=1)
        identity = f"{task.actor.value.lower()}-crew"
        await service.complete_task(turnaround_id, task.task_id, identity, completed_at)
        last_completion = max(last_completion, completed_at)

    if args.justify:
        for task_id in sorted(late_tasks):
            await service.justify_delay(
                turnaround_id, task_id, SUPERVISOR_ID, "Delayed by upstream dependency"
            )

    await service.certify(turnaround_id, SUPERVISOR_ID, last_completion + timedelta(minutes=5))
    await badges.issue_badges(turnaround_id)

    report = (await reporting.build_report(turnaround_id)).to_dict()
    if args.show_audit_log:
        report["audit_log"] = [r.to_dict() for r in await audit_log.read(turnaround_id)]
    return report


def main() -> None:
    args = parse_args()
    config = TurnaroundConfig.from_environment()
    configure_logging(config)

    report = asyncio.run(run_simulation(args, config))
    rendered = json.dumps(report, indent=2)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(rendered + "\n", encoding="utf-8")
        print(f"Report written to {args.output}")
    else:
        print(rendered)


if __name__ == "__main__":
    main()
