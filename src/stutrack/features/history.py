"""Load and format interaction history for the history pane."""

from typing import Optional

from stutrack.model import database, interactions_mod, students_mod


RECENT_TITLE = "Recent Interactions (All Students)"
EMPTY_MESSAGE = "No interactions recorded yet"
DEFAULT_RECENT_LIMIT = 20


def history_title(
    dbase: database.DBase, selected_student_id: Optional[int]
) -> str:
    """Heading shown above the interaction history."""
    if selected_student_id is None:
        return RECENT_TITLE
    student = students_mod.Student.get_by_id(dbase, selected_student_id)
    if student is None:
        return RECENT_TITLE
    return f"{student.full_name}'s History"


def load_history(
    dbase: database.DBase,
    selected_student_id: Optional[int],
    recent_limit: int = DEFAULT_RECENT_LIMIT,
) -> list[interactions_mod.Interaction]:
    """Interactions to display, newest first.

    With no student selected, returns the most recent interactions with any
    student. Otherwise returns every interaction for the selected student.
    """
    if selected_student_id is None:
        return interactions_mod.Interaction.get_recent(dbase, recent_limit)
    return interactions_mod.Interaction.get_for_student(dbase, selected_student_id)


def entry_heading(interaction: interactions_mod.Interaction) -> str:
    """Date, time, and location line, e.g., 'March 01, 2024 • 14:30 • Office'."""
    parts = [interaction.interaction_date.strftime("%B %d, %Y")]
    if interaction.interaction_time is not None:
        parts.append(interaction.interaction_time.strftime("%H:%M"))
    if interaction.location:
        parts.append(interaction.location)
    return " • ".join(parts)
