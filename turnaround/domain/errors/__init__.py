"""Domain errors for the turnaround checklist.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from TurnaroundError.
"""

from turnaround.domain.errors.audit_log import (
    AuditChainBrokenError,
    AuditRecordDeletionError,
)
from turnaround.domain.errors.authorization import UnauthorizedError
from turnaround.domain.errors.certification import (
    AlreadyCertifiedError,
    CertificationError,
    CertificationHashMismatchError,
    MandatoryTaskIncompleteError,
)
from turnaround.domain.errors.task import (
    AlreadyCompletedError,
    InvalidJustificationError,
    InvalidTaskError,
    NotCompletedError,
    NotLateError,
    TaskError,
)
from turnaround.domain.errors.turnaround import (
    InvalidScheduleError,
    TurnaroundAlreadyExistsError,
    TurnaroundNotCertifiedError,
    TurnaroundNotFoundError,
)

__all__: list[str] = [
    "AlreadyCertifiedError",
    "AlreadyCompletedError",
    "AuditChainBrokenError",
    "AuditRecordDeletionError",
    "CertificationError",
    "CertificationHashMismatchError",
    "InvalidJustificationError",
    "InvalidScheduleError",
    "InvalidTaskError",
    "MandatoryTaskIncompleteError",
    "NotCompletedError",
    "NotLateError",
    "TaskError",
    "TurnaroundAlreadyExistsError",
    "TurnaroundNotCertifiedError",
    "TurnaroundNotFoundError",
    "UnauthorizedError",
]
