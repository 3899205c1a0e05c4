"""Student table access."""

from collections.abc import Iterable
import dataclasses
import datetime
from typing import Any, Optional, TYPE_CHECKING

import sqlalchemy as sa


if TYPE_CHECKING:
    from stutrack.model import database


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

STUDENT_COLUMNS = [
    "student_id",
    "first_name",
    "last_name",
    "phone",
    "email",
    "graduation_month",
    "graduation_year",
    "hometown",
    "major",
    "linkedin_url",
    "social_media",
]
"""Columns written when a student is added. created_at is set by the database."""


def convert_timestamp(
    val: datetime.datetime | str | None,
) -> Optional[datetime.datetime]:
    """MySQL returns datetime objects, Sqlite returns strings."""
    if isinstance(val, str):
        return datetime.datetime.fromisoformat(val)
    return val


@dataclasses.dataclass
class Student:
    """A student whose interactions are tracked."""

    student_id: Optional[int]
    first_name: str
    last_name: str
    phone: Optional[str]
    email: Optional[str]
    graduation_month: Optional[str]
    graduation_year: Optional[int]
    hometown: Optional[str]
    major: Optional[str]
    linkedin_url: Optional[str]
    social_media: Optional[str]
    created_at: Optional[datetime.datetime]

    def __init__(
        self,
        first_name: str,
        last_name: str,
        student_id: Optional[int] = None,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        graduation_month: Optional[str] = None,
        graduation_year: Optional[int | str] = None,
        hometown: Optional[str] = None,
        major: Optional[str] = None,
        linkedin_url: Optional[str] = None,
        social_media: Optional[str] = None,
        created_at: Optional[datetime.datetime | str] = None,
    ) -> None:
        """Ensure created_at and graduation_year have the right types.

        Leave student_id as None for new students. The database assigns the
        ID when the student is added.
        """
        self.student_id = student_id
        self.first_name = first_name
        self.last_name = last_name
        self.phone = phone
        self.email = email
        self.graduation_month = graduation_month
        self.graduation_year = (
            int(graduation_year) if graduation_year not in (None, "") else None
        )
        self.hometown = hometown
        self.major = major
        self.linkedin_url = linkedin_url
        self.social_media = social_media
        self.created_at = convert_timestamp(created_at)

    @property
    def full_name(self) -> str:
        """First and last name separated by a space."""
        return f"{self.first_name} {self.last_name}"

    @property
    def graduation(self) -> str:
        """Graduation month and year, e.g., 'May 2026'."""
        parts = [self.graduation_month, self.graduation_year]
        return " ".join(str(part) for part in parts if part)

    @property
    def summary(self) -> str:
        """Major and graduation year for the student directory."""
        parts = [self.major, self.graduation_year]
        return " • ".join(str(part) for part in parts if part)

    def matches(self, search_text: str) -> bool:
        """True if search_text appears anywhere in the student's full name."""
        return search_text.lower() in self.full_name.lower()

    def add(self, dbase: "database.DBase") -> int:
        """Add the Student to the database and set the new student_id.

        Returns:
            Number of rows added.
        """
        query = """
                INSERT INTO students
                            (first_name, last_name, phone, email,
                            graduation_month, graduation_year, hometown, major,
                            linkedin_url, social_media)
                     VALUES (:first_name, :last_name, :phone, :email,
                            :graduation_month, :graduation_year, :hometown, :major,
                            :linkedin_url, :social_media);
        """
        params = self.to_dict()
        del params["student_id"], params["created_at"]
        with dbase.get_db_connection() as conn:
            result = conn.execute(sa.text(query), params)
            self.student_id = result.lastrowid
            row_count = result.rowcount
        return row_count

    def delete(self, dbase: "database.DBase") -> bool:
        """Delete the student and, by cascade, the student's interactions.

        Return True if the student was deleted, False if it did not exist.
        """
        query = """
                DELETE FROM students
                      WHERE student_id = :student_id;
        """
        with dbase.get_db_connection() as conn:
            result = conn.execute(sa.text(query), {"student_id": self.student_id})
            row_count = result.rowcount
        return row_count > 0

    @staticmethod
    def get_all(dbase: "database.DBase") -> list["Student"]:
        """Retrieve the roster, sorted by last name and first name."""
        query = """
                SELECT student_id, first_name, last_name, phone, email,
                       graduation_month, graduation_year, hometown, major,
                       linkedin_url, social_media, created_at
                  FROM students
              ORDER BY last_name, first_name, student_id;
        """
        with dbase.get_db_connection() as conn:
            rows = conn.execute(sa.text(query)).mappings().all()
        return [Student(**row) for row in rows]

    @staticmethod
    def get_by_id(dbase: "database.DBase", student_id: int) -> "Student | None":
        """Retrieve a Student object by student_id."""
        query = """
                SELECT student_id, first_name, last_name, phone, email,
                       graduation_month, graduation_year, hometown, major,
                       linkedin_url, social_media, created_at
                  FROM students
                 WHERE student_id = :student_id;
        """
        with dbase.get_db_connection() as conn:
            row = (
                conn.execute(sa.text(query), {"student_id": student_id})
                .mappings()
                .first()
            )
        if row is None:
            return None
        return Student(**row)

    def to_dict(self) -> dict[str, Any]:
        """Convert the Student dataclass to a dictionary."""
        return {
            "student_id": self.student_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone": self.phone,
            "email": self.email,
            "graduation_month": self.graduation_month,
            "graduation_year": self.graduation_year,
            "hometown": self.hometown,
            "major": self.major,
            "linkedin_url": self.linkedin_url,
            "social_media": self.social_media,
            "created_at": (
                self.created_at.strftime(TIMESTAMP_FORMAT) if self.created_at else None
            ),
        }


def filter_students(students: Iterable[Student], search_text: str) -> list[Student]:
    """Students whose full name contains search_text, ignoring case.

    An empty search returns every student. The order of students is kept.
    """
    return [student for student in students if student.matches(search_text)]
