"""Test exporting data to Excel and CSV files."""

import pathlib

import polars as pl

from stutrack.model import database, excel


def test_write_excel(full_dbase: database.DBase, empty_output_folder) -> None:
    """Write contents of database to an Excel file."""
    # Arrange
    excel_path = empty_output_folder / "excel-export.xlsx"
    # Act
    excel.write(full_dbase, excel_path)
    # Assert
    assert excel_path.exists()
    assert excel_path.stat().st_size > 0


def test_write_excel_empty_database(
    empty_database: database.DBase, empty_output_folder: pathlib.Path
) -> None:
    """An empty database gives a workbook with only header rows."""
    # Arrange
    excel_path = empty_output_folder / "empty-export.xlsx"
    # Act
    excel.write(empty_database, excel_path)
    # Assert
    assert excel_path.exists()


def test_interaction_totals(full_dbase: database.DBase) -> None:
    """Count interactions per student, sorted by name."""
    # Act
    totals = excel.interaction_totals(full_dbase)
    # Assert
    by_id = {row["student_id"]: row for row in totals}
    assert by_id[1]["interactions"] == 6
    assert by_id[1]["last_interaction"] == "2024-03-12"
    assert 8 not in by_id  # Mary Jackson has no interactions
    assert sum(row["interactions"] for row in totals) == 24
    assert [row["last_name"] for row in totals][:2] == ["Curie", "Hopper"]


def test_interaction_totals_empty(empty_database: database.DBase) -> None:
    """No interactions, no totals."""
    # Act, Assert
    assert excel.interaction_totals(empty_database) == []


def test_write_csv(full_dbase: database.DBase, empty_output_folder) -> None:
    """The interaction dataframe can be saved as CSV."""
    # Arrange
    csv_path = empty_output_folder / "interactions.csv"
    # Act
    full_dbase.get_interactions_dataframe().write_csv(
        csv_path, time_format="%H:%M:%S"
    )
    # Assert
    dframe = pl.read_csv(csv_path)
    assert dframe.height == 24
    assert dframe["interaction_time"][0] == "09:00:00"
    assert dframe["last_name"][0] == "Hopper"
