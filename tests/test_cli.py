"""Test the command line interface and the connection check."""

import io
import json
import pathlib

import pytest
import rich.console

from stutrack import __main__ as cli
from stutrack.features import diagnostics
from stutrack.model import config, database, students_mod


def make_console() -> tuple[rich.console.Console, io.StringIO]:
    """Console that writes plain text to a buffer."""
    buffer = io.StringIO()
    return rich.console.Console(file=buffer, width=120, color_system=None), buffer


def test_check_sqlite_database(full_dbase: database.DBase, clean_env) -> None:
    """All steps pass against a working database and the test row is removed."""
    # Arrange
    console, buffer = make_console()
    settings = config.Settings(db_path=full_dbase.db_path)
    # Act
    status = diagnostics.check_database(settings, console)
    # Assert
    output = buffer.getvalue()
    assert status == 0
    assert "Successfully connected" in output
    assert "Students table: 8 record(s)" in output
    assert "Interactions table: 24 record(s)" in output
    assert "Write permissions confirmed" in output
    assert "Test Complete" in output
    names = [s.full_name for s in students_mod.Student.get_all(full_dbase)]
    assert "TEST USER" not in names


def test_check_missing_configuration(clean_env) -> None:
    """Missing MySQL settings are reported and the check fails."""
    # Arrange
    console, buffer = make_console()
    settings = config.Settings(mysql_host="localhost")
    # Act
    status = diagnostics.check_database(settings, console)
    # Assert
    output = buffer.getvalue()
    assert status == 1
    assert "MYSQL_USER is not set" in output
    assert "Attempting to connect" not in output


def test_check_connection_failure(clean_env) -> None:
    """An unreachable server fails the check."""
    # Arrange
    console, buffer = make_console()
    settings = config.Settings(
        mysql_host="127.0.0.1",
        mysql_port=1,
        mysql_user="nobody",
        mysql_password="secret",
        mysql_database="stutrack",
    )
    # Act
    status = diagnostics.check_database(settings, console)
    # Assert
    output = buffer.getvalue()
    assert status == 1
    assert "Connection FAILED" in output
    assert "Password: ***set***" in output
    assert "secret" not in output


def test_parser_defaults_to_app() -> None:
    """Running with no command starts the application."""
    # Act
    args = cli.build_parser().parse_args([])
    # Assert
    assert args.func is cli.run_app


def test_parser_export_args() -> None:
    """The export command takes a path and a database location."""
    # Act
    args = cli.build_parser().parse_args(["export", "out.json", "-d", "my.db"])
    # Assert
    assert args.func is cli.export_data
    assert args.export_path == pathlib.Path("out.json")
    assert args.db_path == pathlib.Path("my.db")


def test_export_and_import_json(
    full_dbase: database.DBase, empty_output_folder: pathlib.Path, clean_env
) -> None:
    """Export to JSON, then import the file into a new database."""
    # Arrange
    parser = cli.build_parser()
    export_path = empty_output_folder / "export.json"
    new_db_path = empty_output_folder / "imported.db"
    # Act
    export_status = cli.export_data(
        parser.parse_args(["export", str(export_path), "-d", str(full_dbase.db_path)])
    )
    import_status = cli.import_data(
        parser.parse_args(["import", str(export_path), "-d", str(new_db_path)])
    )
    # Assert
    assert export_status == 0
    assert import_status == 0
    with open(export_path) as jfile:
        exported = json.load(jfile)
    assert len(exported["students"]) == 8
    imported_dbase = database.DBase(new_db_path)
    assert imported_dbase.to_dict() == full_dbase.to_dict()


@pytest.mark.parametrize("suffix", [".csv", ".xlsx"])
def test_export_other_formats(
    full_dbase: database.DBase,
    empty_output_folder: pathlib.Path,
    clean_env,
    suffix: str,
) -> None:
    """CSV and Excel exports create files."""
    # Arrange
    export_path = empty_output_folder / f"export{suffix}"
    args = cli.build_parser().parse_args(
        ["export", str(export_path), "-d", str(full_dbase.db_path)]
    )
    # Act
    status = cli.export_data(args)
    # Assert
    assert status == 0
    assert export_path.exists()


def test_export_rejects_unknown_suffix(
    full_dbase: database.DBase, empty_output_folder: pathlib.Path, clean_env
) -> None:
    """Only JSON, CSV, and Excel files can be written."""
    # Arrange
    export_path = empty_output_folder / "export.txt"
    args = cli.build_parser().parse_args(
        ["export", str(export_path), "-d", str(full_dbase.db_path)]
    )
    # Act, Assert
    assert cli.export_data(args) == 1
    assert not export_path.exists()


def test_init_db_creates_sqlite_file(
    empty_output_folder: pathlib.Path, clean_env
) -> None:
    """init-db creates a new Sqlite file with both tables."""
    # Arrange
    db_path = empty_output_folder / "fresh.db"
    args = cli.build_parser().parse_args(["init-db", "-d", str(db_path)])
    # Act
    status = cli.init_db(args)
    # Assert
    assert status == 0
    assert set(database.DBase(db_path).get_table_names()) == {
        "students", "interactions"
    }
