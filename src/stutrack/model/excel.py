"""Export student and interaction data to an Excel file."""

import pathlib
from typing import Any

import polars as pl
import xlsxwriter

from stutrack.model import database, interactions_mod, students_mod


def interaction_totals(dbase: database.DBase) -> list[dict[str, Any]]:
    """Number of interactions and most recent interaction date per student."""
    dframe = dbase.get_interactions_dataframe()
    if dframe.is_empty():
        return []
    totals = (
        dframe.group_by("student_id", "last_name", "first_name")
        .agg(
            pl.len().alias("interactions"),
            pl.col("interaction_date").max().alias("last_interaction"),
        )
        .with_columns(pl.col("last_interaction").dt.strftime("%Y-%m-%d"))
        .sort("last_name", "first_name")
    )
    return totals.to_dicts()


def write(dbase: database.DBase, excel_path: pathlib.Path) -> None:
    """Write all data to a Microsoft Excel file."""
    workbook = xlsxwriter.Workbook(excel_path)
    data = dbase.to_dict()
    _write_sheet(
        workbook,
        "Students",
        students_mod.STUDENT_COLUMNS + ["created_at"],
        data["students"],
    )
    _write_sheet(
        workbook,
        "Interactions",
        interactions_mod.INTERACTION_COLUMNS + ["created_at"],
        data["interactions"],
    )
    _write_sheet(
        workbook,
        "Interactions by Student",
        ["student_id", "last_name", "first_name", "interactions", "last_interaction"],
        interaction_totals(dbase),
    )
    workbook.close()


def _write_sheet(
    workbook: xlsxwriter.Workbook,
    sheet_name: str,
    columns: list[str],
    data: list[dict[str, Any]],
) -> None:
    """Write a table of data to a worksheet."""
    sheet = workbook.add_worksheet(sheet_name)
    sheet.write_row(row=0, col=0, data=columns)
    for row_number, row_values in enumerate(data):
        sheet.write_row(
            row=row_number + 1, col=0, data=[row_values.get(col) for col in columns]
        )
