"""Default turnaround task template.

The template decides which role each of the 27 slots is assigned to, its
deadline relative to scheduled arrival and whether it is mandatory. It is a
pure function of the scheduled arrival; the aggregate accepts any other
template that yields 27 definitions with ids 0..26.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import NamedTuple

from turnaround.domain.models.actor import Actor
from turnaround.domain.models.task import TaskDefinition


class _TemplateSlot(NamedTuple):
    name: str
    actor: Actor
    offset_minutes: int
    mandatory: bool


# Ordered by task id. Offsets are minutes after scheduled arrival.
DEFAULT_TEMPLATE: tuple[_TemplateSlot, ...] = (
    _TemplateSlot("Chocks on and aircraft secured", Actor.GROUND_HANDLING, 2, True),
    _TemplateSlot("Ground power connected", Actor.GROUND_HANDLING, 3, True),
    _TemplateSlot("Passenger bridge or stairs positioned", Actor.GATE, 3, True),
    _TemplateSlot("Passenger door opened", Actor.FLIGHT_CREW, 5, True),
    _TemplateSlot("Hold doors opened", Actor.GROUND_HANDLING, 5, True),
    _TemplateSlot("Fuel truck positioned", Actor.FUEL, 10, True),
    _TemplateSlot("Deboarding complete", Actor.GATE, 15, True),
    _TemplateSlot("Refuelling started", Actor.FUEL, 15, True),
    _TemplateSlot("Cabin cleaning started", Actor.CLEANING, 17, True),
    _TemplateSlot("Inbound baggage unloaded", Actor.GROUND_HANDLING, 20, True),
    _TemplateSlot("Galley unloaded", Actor.CATERING, 20, True),
    _TemplateSlot("Inbound cargo unloaded", Actor.GROUND_HANDLING, 25, False),
    _TemplateSlot("Lavatory service complete", Actor.CLEANING, 30, True),
    _TemplateSlot("Potable water service complete", Actor.CLEANING, 30, False),
    _TemplateSlot("Cabin cleaning complete", Actor.CLEANING, 35, True),
    _TemplateSlot("Galley loaded", Actor.CATERING, 35, True),
    _TemplateSlot("Refuelling complete and fuel slip signed", Actor.FUEL, 35, True),
    _TemplateSlot("Cabin security check", Actor.FLIGHT_CREW, 38, True),
    _TemplateSlot("Cabin ready for boarding", Actor.FLIGHT_CREW, 40, True),
    _TemplateSlot("Boarding started", Actor.GATE, 40, True),
    _TemplateSlot("Outbound baggage loaded", Actor.GROUND_HANDLING, 45, True),
    _TemplateSlot("Outbound cargo loaded", Actor.GROUND_HANDLING, 45, False),
    _TemplateSlot("Load sheet accepted", Actor.FLIGHT_CREW, 48, True),
    _TemplateSlot("Boarding complete", Actor.GATE, 50, True),
    _TemplateSlot("Doors closed", Actor.FLIGHT_CREW, 52, True),
    _TemplateSlot("Passenger bridge or stairs removed", Actor.GATE, 53, True),
    _TemplateSlot("Pushback and chocks off", Actor.GROUND_HANDLING, 55, True),
)


def generate_tasks(scheduled_arrival: datetime) -> tuple[TaskDefinition, ...]:
    """Generate the 27 default task definitions for a turnaround.

    Args:
        scheduled_arrival: Scheduled on-block time; every deadline is
            expressed relative to it.

    Returns:
        Task definitions ordered by task id 0..26.
    """
    return tuple(
        TaskDefinition(
            task_id=task_id,
            name=slot.name,
            actor=slot.actor,
            deadline=scheduled_arrival + timedelta(minutes=slot.offset_minutes),
            mandatory=slot.mandatory,
        )
        for task_id, slot in enumerate(DEFAULT_TEMPLATE)
    )
