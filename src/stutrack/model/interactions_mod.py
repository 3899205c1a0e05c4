"""Database interactions table and associated queries.

An interaction is a dated note about a meeting or conversation with a student,
such as an office visit or a chat in the hallway. Every interaction belongs to
exactly one student.
"""

import dataclasses
import datetime
from typing import Any, Optional, TYPE_CHECKING

import sqlalchemy as sa

from stutrack.model import students_mod


if TYPE_CHECKING:
    from stutrack.model import database


INTERACTION_COLUMNS = [
    "interaction_id",
    "student_id",
    "interaction_date",
    "interaction_time",
    "location",
    "notes",
]

TIME_FORMAT = "%H:%M:%S"

_SELECT_WITH_NAMES = """
        SELECT i.interaction_id, i.student_id, i.interaction_date,
               i.interaction_time, i.location, i.notes, i.created_at,
               s.first_name, s.last_name
          FROM interactions AS i
          JOIN students AS s
            ON i.student_id = s.student_id
"""

_NEWEST_FIRST = """
      ORDER BY i.interaction_date DESC, i.interaction_time DESC,
               i.interaction_id DESC
"""


def convert_date(val: datetime.date | str) -> datetime.date:
    """Convert Sqlite date strings to datetime.date objects."""
    if isinstance(val, str):
        return datetime.date.fromisoformat(val)
    return val


def convert_time(
    val: datetime.time | datetime.timedelta | str | None,
) -> Optional[datetime.time]:
    """Convert a TIME column value to datetime.time.

    PyMySQL returns MySQL TIME values as datetime.timedelta objects and Sqlite
    returns strings.
    """
    if isinstance(val, datetime.timedelta):
        return (datetime.datetime.min + val).time()
    if isinstance(val, str):
        return datetime.time.fromisoformat(val) if val else None
    return val


@dataclasses.dataclass
class Interaction:
    """A dated note about a conversation with a student."""

    interaction_id: Optional[int]
    student_id: int
    interaction_date: datetime.date
    interaction_time: Optional[datetime.time]
    location: Optional[str]
    notes: str
    created_at: Optional[datetime.datetime]
    first_name: Optional[str]
    """Student's first name, set when read from the database."""
    last_name: Optional[str]
    """Student's last name, set when read from the database."""

    def __init__(
        self,
        student_id: int,
        interaction_date: datetime.date | str,
        notes: str,
        interaction_time: Optional[datetime.time | datetime.timedelta | str] = None,
        location: Optional[str] = None,
        interaction_id: Optional[int] = None,
        created_at: Optional[datetime.datetime | str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> None:
        """Ensure dates and times are converted to datetime objects."""
        self.interaction_id = interaction_id
        self.student_id = student_id
        self.interaction_date = convert_date(interaction_date)
        self.interaction_time = convert_time(interaction_time)
        self.location = location
        self.notes = notes
        self.created_at = students_mod.convert_timestamp(created_at)
        self.first_name = first_name
        self.last_name = last_name

    @property
    def student_name(self) -> str:
        """Name of the student the interaction belongs to."""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def iso_time(self) -> Optional[str]:
        """Interaction time as an HH:MM:SS string, or None."""
        if self.interaction_time is None:
            return None
        return self.interaction_time.strftime(TIME_FORMAT)

    def add(self, dbase: "database.DBase") -> int:
        """Add the interaction to the database and set the new interaction_id.

        Returns:
            Number of rows added.
        """
        query = """
                INSERT INTO interactions
                            (student_id, interaction_date, interaction_time,
                            location, notes)
                     VALUES (:student_id, :interaction_date, :interaction_time,
                            :location, :notes);
        """
        with dbase.get_db_connection() as conn:
            result = conn.execute(
                sa.text(query),
                {
                    "student_id": self.student_id,
                    "interaction_date": self.interaction_date.isoformat(),
                    "interaction_time": self.iso_time,
                    "location": self.location,
                    "notes": self.notes,
                },
            )
            self.interaction_id = result.lastrowid
            row_count = result.rowcount
        return row_count

    @staticmethod
    def get_recent(dbase: "database.DBase", limit: int = 20) -> list["Interaction"]:
        """Most recent interactions with any student, newest first."""
        query = _SELECT_WITH_NAMES + _NEWEST_FIRST + " LIMIT :limit;"
        with dbase.get_db_connection() as conn:
            rows = conn.execute(sa.text(query), {"limit": limit}).mappings().all()
        return [Interaction(**row) for row in rows]

    @staticmethod
    def get_for_student(
        dbase: "database.DBase", student_id: int
    ) -> list["Interaction"]:
        """All of a student's interactions, newest first."""
        query = _SELECT_WITH_NAMES + " WHERE i.student_id = :student_id" + _NEWEST_FIRST
        with dbase.get_db_connection() as conn:
            rows = (
                conn.execute(sa.text(query), {"student_id": student_id})
                .mappings()
                .all()
            )
        return [Interaction(**row) for row in rows]

    @staticmethod
    def get_all(dbase: "database.DBase") -> list["Interaction"]:
        """Every interaction in chronological order."""
        query = _SELECT_WITH_NAMES + """
      ORDER BY i.interaction_date, i.interaction_time, i.interaction_id;
        """
        with dbase.get_db_connection() as conn:
            rows = conn.execute(sa.text(query)).mappings().all()
        return [Interaction(**row) for row in rows]

    @staticmethod
    def count_for_student(dbase: "database.DBase", student_id: int) -> int:
        """Number of interactions recorded for a student."""
        query = """
                SELECT COUNT(*) AS interaction_count
                  FROM interactions
                 WHERE student_id = :student_id;
        """
        with dbase.get_db_connection() as conn:
            return conn.execute(
                sa.text(query), {"student_id": student_id}
            ).scalar_one()

    def to_dict(self) -> dict[str, Any]:
        """Convert the interaction to a JSON-compatible dictionary."""
        return {
            "interaction_id": self.interaction_id,
            "student_id": self.student_id,
            "interaction_date": self.interaction_date.isoformat(),
            "interaction_time": self.iso_time,
            "location": self.location,
            "notes": self.notes,
            "created_at": (
                self.created_at.strftime(students_mod.TIMESTAMP_FORMAT)
                if self.created_at
                else None
            ),
        }
