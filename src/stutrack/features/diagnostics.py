"""Step-by-step database connection check, run with `stutrack check`."""

import rich.console
import rich.markup

from stutrack.model import config, database, schema, students_mod


COMMON_PROBLEMS = [
    "MySQL server is not running",
    "Host/port are incorrect",
    "Username/password are incorrect",
    "Database doesn't exist",
    "MySQL server doesn't allow remote connections",
    "Firewall is blocking the connection",
    "User doesn't have permission to connect remotely",
]


def check_database(
    settings: config.Settings, console: rich.console.Console
) -> int:
    """Report whether the application can read and write its database.

    Returns:
        Exit status. 1 if settings are missing or the connection fails,
        otherwise 0. Missing tables and failed writes are reported but do
        not change the exit status.
    """
    console.print("[bold]=== Database Connection Test ===[/bold]\n")

    console.print("Step 1: Checking configuration...")
    if not settings.uses_sqlite:
        for var_name in settings.missing_values:
            console.print(f"  [red]✗ {var_name} is not set[/red]")
        if settings.missing_values:
            return 1
        for label, value in settings.describe().items():
            console.print(f"  {label}: {value}", markup=False)
    else:
        console.print(f"  Sqlite file: {settings.db_path}", markup=False)
    console.print("[green]✓ Configuration is complete[/green]\n")

    console.print("Step 2: Attempting to connect to database...")
    try:
        dbase = database.DBase.from_settings(settings)
        dbase.check_connection()
    except (config.ConfigError, database.DBaseError) as err:
        console.print("[red]✗ Connection FAILED[/red]")
        console.print(f"Error message: {err}\n", markup=False)
        console.print("Common issues:")
        for num, problem in enumerate(COMMON_PROBLEMS, start=1):
            console.print(f"  {num}. {problem}")
        return 1
    console.print("[green]✓ Successfully connected to database![/green]\n")

    try:
        _check_tables(dbase, console)
    finally:
        dbase.dispose()
        console.print("Step 6: Connection closed\n")
    console.print("[bold]=== Test Complete ===[/bold]")
    return 0


def _check_tables(dbase: database.DBase, console: rich.console.Console) -> None:
    """List tables, count rows, and try a write."""
    console.print("Step 3: Checking for required tables...")
    try:
        tables = dbase.get_table_names()
    except database.DBaseError as err:
        message = rich.markup.escape(str(err))
        console.print(f"[red]✗ Error listing tables: {message}[/red]\n")
        return
    console.print(f"  Found {len(tables)} table(s): {', '.join(tables)}")
    for table_name in schema.TABLE_NAMES:
        if table_name in tables:
            console.print(f"  [green]✓ '{table_name}' table exists[/green]")
        else:
            console.print(
                f"  [red]✗ '{table_name}' table NOT found - "
                "run `stutrack init-db` to create it[/red]"
            )
    console.print()

    console.print("Step 4: Testing basic queries...")
    for table_name in schema.TABLE_NAMES:
        if table_name not in tables:
            console.print(f"  - Skipping {table_name} query (table doesn't exist)")
            continue
        try:
            count = dbase.count_rows(table_name)
        except database.DBaseError as err:
            message = rich.markup.escape(str(err))
            console.print(f"  [red]✗ Error querying {table_name}: {message}[/red]")
            continue
        console.print(
            f"  [green]✓ {table_name.capitalize()} table: {count} record(s)[/green]"
        )
    console.print()

    console.print("Step 5: Testing write permissions...")
    if "students" not in tables:
        console.print("  - Skipping write test (table doesn't exist)\n")
        return
    test_student = students_mod.Student("TEST", "USER")
    try:
        test_student.add(dbase)
        console.print("  [green]✓ Successfully inserted test record[/green]")
        test_student.delete(dbase)
        console.print("  [green]✓ Successfully deleted test record[/green]")
    except database.DBaseError as err:
        message = rich.markup.escape(str(err))
        console.print(f"  [red]✗ Write test failed: {message}[/red]")
        console.print("  Your user may not have INSERT/DELETE permissions\n")
        return
    console.print("  [green]✓ Write permissions confirmed[/green]\n")
