"""Test helpers for turnaround tests.

Usage:
    from tests.helpers import uniform_template, identity_for
"""

from tests.helpers.turnaround import (
    ADMIN_ID,
    OUTSIDER_ID,
    SUPERVISOR_ID,
    assign_all_roles,
    build_checklist,
    run_turnaround,
    identity_for,
    uniform_template,
)

__all__ = [
    "ADMIN_ID",
    "OUTSIDER_ID",
    "SUPERVISOR_ID",
    "assign_all_roles",
    "build_checklist",
    "run_turnaround",
    "identity_for",
    "uniform_template",
]
