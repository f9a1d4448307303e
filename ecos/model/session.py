from __future__ import annotations

import re as regex

from .base import BaseModel

_LegacySessionID = regex.compile(r"^session_(\d+)_")


class SessionContext(BaseModel):
    """Identifies whose evaluation is being written and where it belongs."""

    session_id: str
    scenario_id: int | None = None
    student_id: str | None = None


class EcosSession(BaseModel):
    session_id: str
    scenario_id: int | None = None
    student_id: str | None = None
    status: str = "active"

    def context(self) -> SessionContext:
        scenario_id = self.scenario_id if self.scenario_id is not None else session_scenario_id(self.session_id)
        return SessionContext(session_id=self.session_id, scenario_id=scenario_id, student_id=self.student_id)


def session_scenario_id(session_id: str) -> int | None:
    """Recover the scenario id embedded in ``session_<scenario>_<stamp>_<rand>`` ids."""
    match = _LegacySessionID.match(session_id or "")
    if match is None:
        return None
    scenario_id = int(match.group(1))
    return scenario_id if scenario_id > 0 else None
