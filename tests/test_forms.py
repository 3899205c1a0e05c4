"""Test validation and saving of the interaction and student forms."""

import datetime

import pytest

from stutrack.features import forms, validators
from stutrack.model import database, interactions_mod, session, students_mod


def interaction_form(**kwargs) -> forms.InteractionForm:
    """Valid form for 2024-03-01, with fields overridden by kwargs."""
    values = {
        "interaction_date": "2024-03-01",
        "interaction_time": "14:30",
        "location": "Office",
        "notes": "Discussed internship",
    }
    values.update(kwargs)
    return forms.InteractionForm(**values)


def test_submit_interaction(
    empty_database: database.DBase, state: session.SessionState
) -> None:
    """Ada's interaction is saved and the refresh counter goes up."""
    # Arrange
    ada = students_mod.Student("Ada", "Lovelace")
    ada.add(empty_database)
    state.select(ada.student_id)
    # Act
    interaction = forms.submit_interaction(empty_database, state, interaction_form())
    # Assert
    assert state.refresh == 1
    assert interaction.interaction_id is not None
    saved = interactions_mod.Interaction.get_for_student(
        empty_database, ada.student_id
    )
    assert len(saved) == 1
    assert saved[0].interaction_time == datetime.time(14, 30)
    assert saved[0].location == "Office"
    recent = interactions_mod.Interaction.get_recent(empty_database)
    assert recent[0].student_name == "Ada Lovelace"


def test_submit_interaction_requires_selection(
    full_dbase: database.DBase, state: session.SessionState
) -> None:
    """Nothing is saved if no student is selected."""
    # Arrange
    before = full_dbase.count_rows("interactions")
    # Act, Assert
    with pytest.raises(forms.ValidationError, match="select a student"):
        forms.submit_interaction(full_dbase, state, interaction_form())
    assert full_dbase.count_rows("interactions") == before
    assert state.refresh == 0


@pytest.mark.parametrize("notes", ["", "   ", "\n\t"])
def test_submit_interaction_requires_notes(
    full_dbase: database.DBase, state: session.SessionState, notes: str
) -> None:
    """Blank notes are rejected."""
    # Arrange
    state.select(1)
    before = full_dbase.count_rows("interactions")
    # Act, Assert
    with pytest.raises(forms.ValidationError, match="notes"):
        forms.submit_interaction(full_dbase, state, interaction_form(notes=notes))
    assert full_dbase.count_rows("interactions") == before
    assert state.refresh == 0


@pytest.mark.parametrize(
    "field, value",
    [
        ("interaction_date", "not a date"),
        ("interaction_date", ""),
        ("interaction_time", "25:99"),
        ("interaction_time", "noon-ish"),
        ("interaction_time", "1430"),
        ("interaction_time", "2024-03-01"),
        ("interaction_date", "14:30"),
    ],
)
def test_submit_interaction_rejects_bad_values(
    full_dbase: database.DBase, state: session.SessionState, field: str, value: str
) -> None:
    """Dates and times must be recognizable."""
    # Arrange
    state.select(1)
    before = full_dbase.count_rows("interactions")
    # Act, Assert
    with pytest.raises(forms.ValidationError):
        forms.submit_interaction(
            full_dbase, state, interaction_form(**{field: value})
        )
    assert full_dbase.count_rows("interactions") == before


def test_blank_time_and_location_saved_as_null(
    full_dbase: database.DBase, state: session.SessionState
) -> None:
    """Optional fields are stored as NULL when left blank."""
    # Arrange
    state.select(8)
    # Act
    forms.submit_interaction(
        full_dbase, state, interaction_form(interaction_time="", location="  ")
    )
    # Assert
    saved = interactions_mod.Interaction.get_for_student(full_dbase, 8)
    assert saved[0].interaction_time is None
    assert saved[0].location is None


def test_refresh_increases_with_each_write(
    full_dbase: database.DBase, state: session.SessionState
) -> None:
    """Every successful save increments the refresh counter."""
    # Arrange
    state.select(2)
    # Act
    forms.submit_interaction(full_dbase, state, interaction_form())
    forms.submit_student(full_dbase, state, forms.StudentForm("Ada", "Lovelace"))
    forms.submit_interaction(full_dbase, state, interaction_form(notes="Again"))
    # Assert
    assert state.refresh == 3
    assert state.selected_student_id == 2


def test_submit_student(
    empty_database: database.DBase, state: session.SessionState
) -> None:
    """Add a student without selecting the new student."""
    # Arrange
    form = forms.StudentForm(
        first_name=" Ada ",
        last_name="Lovelace",
        email="ada@example.edu",
        graduation_month="May",
        graduation_year="2026",
        major="Mathematics",
    )
    # Act
    student = forms.submit_student(empty_database, state, form)
    # Assert
    assert state.refresh == 1
    assert state.selected_student_id is None
    saved = students_mod.Student.get_by_id(empty_database, student.student_id)
    assert saved.full_name == "Ada Lovelace"
    assert saved.graduation_year == 2026
    assert saved.summary == "Mathematics • 2026"
    assert saved.phone is None
    assert saved.hometown is None


@pytest.mark.parametrize(
    "first_name, last_name",
    [("", "Lovelace"), ("Ada", ""), ("  ", "Lovelace"), ("", "")],
)
def test_submit_student_requires_names(
    empty_database: database.DBase,
    state: session.SessionState,
    first_name: str,
    last_name: str,
) -> None:
    """First and last names are required."""
    # Act, Assert
    with pytest.raises(forms.ValidationError, match="required"):
        forms.submit_student(
            empty_database, state, forms.StudentForm(first_name, last_name)
        )
    assert empty_database.count_rows("students") == 0
    assert state.refresh == 0


@pytest.mark.parametrize("year", ["twenty", "2019", "2041"])
def test_submit_student_rejects_bad_year(
    empty_database: database.DBase, state: session.SessionState, year: str
) -> None:
    """Graduation year must be a number in range."""
    # Act, Assert
    with pytest.raises(forms.ValidationError, match="Graduation year"):
        forms.submit_student(
            empty_database,
            state,
            forms.StudentForm("Ada", "Lovelace", graduation_year=year),
        )
    assert empty_database.count_rows("students") == 0


def test_parse_time() -> None:
    """Times can be entered several ways."""
    # Act, Assert
    assert validators.parse_time("14:30") == datetime.time(14, 30)
    assert validators.parse_time("2:30 pm") == datetime.time(14, 30)
    assert validators.parse_time("") is None
    with pytest.raises(ValueError):
        validators.parse_time("later")
    with pytest.raises(ValueError):
        validators.parse_time("1430")
    with pytest.raises(ValueError):
        validators.parse_time("2024-03-01")
    with pytest.raises(ValueError):
        validators.parse_time("2024-03-01 14:30")


def test_parse_date() -> None:
    """A date field needs a date, not just a time."""
    # Act, Assert
    assert validators.parse_date("2024-03-01") == datetime.date(2024, 3, 1)
    assert validators.parse_date("March 1, 2024") == datetime.date(2024, 3, 1)
    with pytest.raises(ValueError):
        validators.parse_date("14:30")
    with pytest.raises(ValueError):
        validators.parse_date("")


def test_year_validator() -> None:
    """Blank years are fine, others must be in range."""
    # Arrange
    validator = validators.YearValidator(2020, 2040)
    # Act, Assert
    assert validator.validate("").is_valid
    assert validator.validate("2026").is_valid
    assert not validator.validate("2041").is_valid
    assert not validator.validate("abc").is_valid


def test_default_date_is_today() -> None:
    """The date field starts at today's date."""
    # Act, Assert
    assert forms.default_date() == datetime.date.today().isoformat()
    assert validators.parse_time(forms.default_time()) is not None
