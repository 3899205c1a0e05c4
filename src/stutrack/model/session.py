"""Per-session selection state."""

import dataclasses
from typing import Optional


@dataclasses.dataclass
class SessionState:
    """Selected student and refresh counter for one user session.

    Views that display database contents must be recomputed whenever
    selected_student_id or refresh changes. Every successful write increments
    refresh.
    """

    selected_student_id: Optional[int] = None
    refresh: int = 0

    def select(self, student_id: int) -> None:
        """Select a student in response to a click in the student directory."""
        self.selected_student_id = student_id

    def mark_changed(self) -> int:
        """Record a database write. Returns the new refresh count."""
        self.refresh += 1
        return self.refresh

