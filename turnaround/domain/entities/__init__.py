"""Domain entities (aggregate roots)."""

from turnaround.domain.entities.turnaround_checklist import TurnaroundChecklist

__all__: list[str] = ["TurnaroundChecklist"]
