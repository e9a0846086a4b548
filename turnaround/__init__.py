"""
Turnaround Checklist - aircraft turnaround lifecycle tracking.

One turnaround carries 27 time-bound tasks split across six operational
roles, tracked from scheduled arrival to certified departure:

- Task completions are classified on-time or late against their deadline
- Late tasks may be justified with free text
- Role assignment and operational privilege decide who may act on a task
- Certification seals a KPI snapshot behind a SHA-256 commitment
- Every transition lands in an append-only, hash-chained audit log
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
