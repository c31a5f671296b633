from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(slots=True)
class ScheduledTask:
    """A deferred bus emission.

    ``remaining`` counts down in seconds on every tick. When it reaches zero the
    scheduler emits ``event`` with ``payload`` unless the task belongs to a
    session that is no longer active.
    """

    event: str
    remaining: float
    session_id: int | None = None
    sequence: int = 0
    payload: Dict[str, Any] = field(default_factory=dict)
