"""Connect to the MySQL or Sqlite database and run queries."""

from collections.abc import Iterator
import contextlib
import datetime
import pathlib
from typing import Any, Optional

import polars as pl
import sqlalchemy as sa
from sqlalchemy import engine, event, exc, pool

from stutrack.model import config, interactions_mod, schema, students_mod


class DBaseError(Exception):
    """Error occurred when working with database."""


class ConnectivityError(DBaseError):
    """Unable to reach or log into the database server."""


class PersistenceError(DBaseError):
    """A statement failed, e.g., a constraint violation or malformed query."""


def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """Sqlite ignores foreign keys, including ON DELETE CASCADE, unless enabled."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON;")
    cursor.close()


def _driver_message(err: exc.SQLAlchemyError) -> str:
    """Error message from the underlying database driver."""
    if isinstance(err, exc.DBAPIError) and err.orig is not None:
        return str(err.orig)
    return str(err)


class DBase:
    """Read and write to database."""

    db_path: Optional[pathlib.Path]
    """Path to Sqlite database, None when connected to MySQL."""
    url: engine.URL
    """SQLAlchemy connection URL."""
    engine: engine.Engine
    """Creates a new DBAPI connection for each operation."""

    def __init__(
        self, location: pathlib.Path | engine.URL, create_new: bool = False
    ) -> None:
        """Set database location.

        Args:
            location: Path to a Sqlite file or a SQLAlchemy URL for a MySQL
                database.
            create_new: Create the tables. A Sqlite file must not already
                exist when create_new is True, and must exist otherwise.
        """
        if isinstance(location, engine.URL):
            self.db_path = None
            self.url = location
        else:
            self.db_path = location
            self.url = engine.URL.create("sqlite", database=str(location))
            if create_new and location.exists():
                raise DBaseError(
                    f"Cannot create new database at {location}, file already exists."
                )
            if not create_new and not location.exists():
                raise DBaseError(f"Database file at {location} does not exist.")
        self.engine = sa.create_engine(self.url, poolclass=pool.NullPool)
        if self.is_sqlite:
            event.listen(self.engine, "connect", _enable_foreign_keys)
        if create_new:
            self.create_tables()

    @classmethod
    def from_settings(
        cls, settings: config.Settings, create_new: bool = False
    ) -> "DBase":
        """Connect to the database selected in the application settings.

        With create_new, missing tables are created. An existing Sqlite file
        is reused rather than rejected.
        """
        if settings.db_path is None:
            return cls(settings.database_url(), create_new=create_new)
        if create_new and not settings.db_path.exists():
            return cls(settings.db_path, create_new=True)
        dbase = cls(settings.db_path)
        if create_new:
            dbase.create_tables()
        return dbase

    @property
    def is_sqlite(self) -> bool:
        """True for local Sqlite database files."""
        return self.url.get_backend_name() == "sqlite"

    @property
    def name(self) -> str:
        """Human-readable database location."""
        if self.db_path is not None:
            return str(self.db_path)
        return self.url.render_as_string(hide_password=True)

    @contextlib.contextmanager
    def get_db_connection(self) -> Iterator[sa.Connection]:
        """Open a connection for a single operation.

        The transaction is committed if the block succeeds and rolled back if
        it raises. The connection is closed either way.

        Raises:
            ConnectivityError: if a connection cannot be opened.
            PersistenceError: if a statement fails.
        """
        try:
            conn = self.engine.connect()
        except exc.DBAPIError as err:
            raise ConnectivityError(
                f"Unable to connect to {self.name}: {_driver_message(err)}"
            ) from err
        try:
            with conn.begin():
                yield conn
        except exc.SQLAlchemyError as err:
            raise PersistenceError(_driver_message(err)) from err
        finally:
            conn.close()

    def create_tables(self) -> None:
        """Creates the database tables if they don't already exist."""
        statements = schema.SQLITE_SCHEMA if self.is_sqlite else schema.MYSQL_SCHEMA
        with self.get_db_connection() as conn:
            for statement in statements:
                conn.execute(sa.text(statement))

    def check_connection(self) -> None:
        """Run a trivial query, raising ConnectivityError if the server is down."""
        with self.get_db_connection() as conn:
            conn.execute(sa.text("SELECT 1;"))

    def get_table_names(self) -> list[str]:
        """Names of all tables in the database."""
        with self.get_db_connection() as conn:
            return sa.inspect(conn).get_table_names()

    def count_rows(self, table_name: str) -> int:
        """Number of rows in the students or interactions table."""
        if table_name not in schema.TABLE_NAMES:
            raise DBaseError(f"Unknown table {table_name}.")
        with self.get_db_connection() as conn:
            return conn.execute(
                sa.text(f"SELECT COUNT(*) AS row_count FROM {table_name};")
            ).scalar_one()

    def dispose(self) -> None:
        """Release any resources held by the engine."""
        self.engine.dispose()

    def get_interactions_dataframe(self) -> pl.DataFrame:
        """Get a Polars dataframe with every interaction and the student's name."""
        records = [
            {
                "interaction_id": interaction.interaction_id,
                "student_id": interaction.student_id,
                "first_name": interaction.first_name,
                "last_name": interaction.last_name,
                "interaction_date": interaction.interaction_date,
                "interaction_time": interaction.interaction_time,
                "location": interaction.location,
                "notes": interaction.notes,
            }
            for interaction in interactions_mod.Interaction.get_all(self)
        ]
        return pl.from_dicts(
            records,
            schema={
                "interaction_id": pl.Int64,
                "student_id": pl.Int64,
                "first_name": pl.String,
                "last_name": pl.String,
                "interaction_date": pl.Date,
                "interaction_time": pl.Time,
                "location": pl.String,
                "notes": pl.String,
            },
        )

    def to_dict(self) -> dict[str, list[dict[str, str | int | None]]]:
        """Save database contents to a JSON-compatible dictionary.

        Returns:
            Contents of the database as a Python dictionary. Format:
            {<table_name>: [{<col_name>: <col_value>}]}
        """
        return {
            "students": [
                student.to_dict() for student in students_mod.Student.get_all(self)
            ],
            "interactions": [
                interaction.to_dict()
                for interaction in interactions_mod.Interaction.get_all(self)
            ],
        }

    def load_from_dict(
        self, db_data_dict: dict[str, list[dict[str, str | int | None]]]
    ) -> None:
        """Import data into the database, keeping the original IDs."""
        student_query = """
            INSERT INTO students
                        (student_id, first_name, last_name, phone, email,
                        graduation_month, graduation_year, hometown, major,
                        linkedin_url, social_media, created_at)
                 VALUES (:student_id, :first_name, :last_name, :phone, :email,
                        :graduation_month, :graduation_year, :hometown, :major,
                        :linkedin_url, :social_media, :created_at);
        """
        interaction_query = """
            INSERT INTO interactions
                        (interaction_id, student_id, interaction_date,
                        interaction_time, location, notes, created_at)
                 VALUES (:interaction_id, :student_id, :interaction_date,
                        :interaction_time, :location, :notes, :created_at);
        """
        now = datetime.datetime.now().strftime(students_mod.TIMESTAMP_FORMAT)
        students = [
            {col: student.get(col) for col in students_mod.STUDENT_COLUMNS}
            | {"created_at": student.get("created_at") or now}
            for student in db_data_dict.get("students", [])
        ]
        interactions = [
            {col: record.get(col) for col in interactions_mod.INTERACTION_COLUMNS}
            | {"created_at": record.get("created_at") or now}
            for record in db_data_dict.get("interactions", [])
        ]
        with self.get_db_connection() as conn:
            if students:
                conn.execute(sa.text(student_query), students)
            if interactions:
                conn.execute(sa.text(interaction_query), interactions)
