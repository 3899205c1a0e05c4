"""Start the Student Interactions Tracker."""
import argparse
import json
import pathlib
import sys

import rich
import rich.console
import rich.markup

from stutrack.features import diagnostics
from stutrack.model import config, database, excel
import stutrack.view.main_app


EXPORT_SUFFIXES = [".json", ".csv", ".xlsx"]


def build_parser() -> argparse.ArgumentParser:
    """Define command line arguments."""
    location_parser = argparse.ArgumentParser(add_help=False)
    location_parser.add_argument(
        "-d", "--db_path",
        help="Path to a Sqlite database file, used instead of MySQL",
        type=pathlib.Path,
        default=None
    )
    location_parser.add_argument(
        "-c", "--config_path",
        help="Path to config file",
        type=pathlib.Path,
        default=None
    )

    parser = argparse.ArgumentParser(
        prog="stutrack",
        description="Track interactions with students.",
    )
    parser.set_defaults(func=run_app)
    subparsers = parser.add_subparsers()

    app_parser = subparsers.add_parser(
        "app",
        parents=[location_parser],
        help="Run the Student Interactions Tracker application."
    )
    app_parser.set_defaults(func=run_app)

    init_parser = subparsers.add_parser(
        "init-db",
        parents=[location_parser],
        help="Create the students and interactions tables."
    )
    init_parser.set_defaults(func=init_db)

    check_parser = subparsers.add_parser(
        "check",
        parents=[location_parser],
        help="Test the database connection and permissions."
    )
    check_parser.set_defaults(func=check_db)

    export_parser = subparsers.add_parser(
        "export",
        parents=[location_parser],
        help="Export data to a JSON, CSV, or Excel file."
    )
    export_parser.set_defaults(func=export_data)
    export_parser.add_argument(
        "export_path",
        type=pathlib.Path,
        help="Output file, ending in .json, .csv, or .xlsx."
    )

    import_parser = subparsers.add_parser(
        "import",
        parents=[location_parser],
        help="Import students and interactions from a JSON file."
    )
    import_parser.set_defaults(func=import_data)
    import_parser.add_argument(
        "import_path",
        type=pathlib.Path,
        help="JSON file created by the export command."
    )
    return parser


def run_app(args: argparse.Namespace) -> int:
    """Run the Student Interactions Tracker TUI application."""
    config.settings.update_from_args(args)
    # A missing Sqlite file is created, which is handy for trying out the app.
    dbase = database.DBase.from_settings(
        config.settings, create_new=config.settings.uses_sqlite
    )
    app = stutrack.view.main_app.StuTrack(dbase, config.settings.recent_limit)
    app.run()
    return app.return_code or 0


def init_db(args: argparse.Namespace) -> int:
    """Create any missing tables."""
    config.settings.update_from_args(args)
    dbase = database.DBase.from_settings(config.settings, create_new=True)
    rich.print(f"[green]Tables are ready in {rich.markup.escape(dbase.name)}[/green]")
    return 0


def check_db(args: argparse.Namespace) -> int:
    """Run the connection diagnostic."""
    config.settings.update_from_args(args)
    return diagnostics.check_database(config.settings, rich.console.Console())


def export_data(args: argparse.Namespace) -> int:
    """Write the database contents to a file."""
    config.settings.update_from_args(args)
    export_path = to_absolute_path(args.export_path)
    dbase = database.DBase.from_settings(config.settings)
    match export_path.suffix.lower():
        case ".json":
            with open(export_path, "wt") as jfile:
                json.dump(dbase.to_dict(), jfile, indent=2)
        case ".csv":
            dbase.get_interactions_dataframe().write_csv(
                export_path, time_format="%H:%M:%S"
            )
        case ".xlsx":
            excel.write(dbase, export_path)
        case _:
            rich.print(
                f"[red]Incorrect file type, use one of {', '.join(EXPORT_SUFFIXES)}[/red]"
            )
            return 1
    rich.print(f"[green]Exported data to {rich.markup.escape(str(export_path))}[/green]")
    return 0


def import_data(args: argparse.Namespace) -> int:
    """Load students and interactions from a JSON export."""
    config.settings.update_from_args(args)
    import_path = to_absolute_path(args.import_path)
    with open(import_path, "rt") as jfile:
        imported_data = json.load(jfile)
    dbase = database.DBase.from_settings(config.settings, create_new=True)
    dbase.load_from_dict(imported_data)
    rich.print(
        f"[green]Imported {len(imported_data.get('students', []))} students and "
        f"{len(imported_data.get('interactions', []))} interactions[/green]"
    )
    return 0


def to_absolute_path(path: pathlib.Path) -> pathlib.Path:
    """Convert relative paths to absolute paths."""
    if not path.is_absolute():
        path = pathlib.Path.cwd() / path
    return path


def main() -> None:
    """Function to run the app, used for the pyproject.toml entry point."""
    parser = build_parser()
    args = parser.parse_args()
    try:
        status = args.func(args)
    except (config.ConfigError, database.DBaseError) as err:
        rich.print(f"[red]Error: {rich.markup.escape(str(err))}[/red]")
        status = 1
    sys.exit(status)


if __name__ == "__main__":
    main()
