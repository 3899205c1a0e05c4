"""Validate and save the interaction and new-student forms.

Both submit functions check every field before touching the database, so a
ValidationError always means nothing was written. A successful write bumps
the session's refresh counter so that views showing database contents reload.
"""

import dataclasses
import datetime
from typing import Optional

import textual

from stutrack.features import validators
from stutrack.model import database, interactions_mod, session, students_mod


FIRST_GRADUATION_YEAR = 2020
LAST_GRADUATION_YEAR = 2040


class ValidationError(Exception):
    """A required form field is missing or a field value is invalid."""


def default_date() -> str:
    """Initial value for the interaction date field."""
    return datetime.date.today().isoformat()


def default_time() -> str:
    """Initial value for the interaction time field."""
    return datetime.datetime.now().strftime("%H:%M")


def _optional(value: str) -> Optional[str]:
    """Store blank optional fields as NULL."""
    value = value.strip()
    return value if value else None


@dataclasses.dataclass
class InteractionForm:
    """Raw text from the Log Interaction form."""

    interaction_date: str
    interaction_time: str
    location: str
    notes: str

    def to_interaction(
        self, student_id: Optional[int]
    ) -> interactions_mod.Interaction:
        """Check the form and build an Interaction for the selected student."""
        if student_id is None:
            raise ValidationError("Please select a student first")
        if not self.notes.strip():
            raise ValidationError("Please enter some notes")
        try:
            interaction_date = validators.parse_date(self.interaction_date)
        except ValueError:
            raise ValidationError(
                f"Invalid date: {self.interaction_date!r}"
            ) from None
        try:
            interaction_time = validators.parse_time(self.interaction_time)
        except ValueError:
            raise ValidationError(
                f"Invalid time: {self.interaction_time!r}"
            ) from None
        return interactions_mod.Interaction(
            student_id=student_id,
            interaction_date=interaction_date,
            interaction_time=interaction_time,
            location=_optional(self.location),
            notes=self.notes,
        )


@dataclasses.dataclass
class StudentForm:
    """Raw text from the Add New Student dialog."""

    first_name: str
    last_name: str
    phone: str = ""
    email: str = ""
    graduation_month: str = ""
    graduation_year: str = ""
    hometown: str = ""
    major: str = ""
    linkedin_url: str = ""
    social_media: str = ""

    def to_student(self) -> students_mod.Student:
        """Check the form and build a new Student."""
        if not self.first_name.strip() or not self.last_name.strip():
            raise ValidationError("First and last name are required")
        graduation_year: Optional[int] = None
        if self.graduation_year.strip():
            try:
                graduation_year = int(self.graduation_year.strip())
            except ValueError:
                raise ValidationError(
                    f"Graduation year must be a number, got {self.graduation_year!r}"
                ) from None
            if not FIRST_GRADUATION_YEAR <= graduation_year <= LAST_GRADUATION_YEAR:
                raise ValidationError(
                    f"Graduation year must be between {FIRST_GRADUATION_YEAR} "
                    f"and {LAST_GRADUATION_YEAR}"
                )
        return students_mod.Student(
            first_name=self.first_name.strip(),
            last_name=self.last_name.strip(),
            phone=_optional(self.phone),
            email=_optional(self.email),
            graduation_month=_optional(self.graduation_month),
            graduation_year=graduation_year,
            hometown=_optional(self.hometown),
            major=_optional(self.major),
            linkedin_url=_optional(self.linkedin_url),
            social_media=_optional(self.social_media),
        )


def submit_interaction(
    dbase: database.DBase,
    state: session.SessionState,
    form: InteractionForm,
) -> interactions_mod.Interaction:
    """Save an interaction for the selected student.

    Raises:
        ValidationError: if no student is selected or a field is invalid.
        PersistenceError, ConnectivityError: if the database write fails.
    """
    interaction = form.to_interaction(state.selected_student_id)
    interaction.add(dbase)
    state.mark_changed()
    textual.log(
        f"Saved interaction {interaction.interaction_id} "
        f"for student {interaction.student_id}"
    )
    return interaction


def submit_student(
    dbase: database.DBase,
    state: session.SessionState,
    form: StudentForm,
) -> students_mod.Student:
    """Add a new student. The new student is not selected.

    Raises:
        ValidationError: if a name is blank or the graduation year is invalid.
        PersistenceError, ConnectivityError: if the database write fails.
    """
    student = form.to_student()
    student.add(dbase)
    state.mark_changed()
    textual.log(f"Added student {student.student_id}: {student.full_name}")
    return student
