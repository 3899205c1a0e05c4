"""Main entry point for the Student Interactions Tracker."""

import textual
from textual import app

from stutrack.features import history
from stutrack.model import database, session
from stutrack.view import error_dialogs, tracker_screen


class StuTrack(app.App):
    """Checks the database connection, then shows the tracker screen."""

    CSS_PATH = "../styles/main.tcss"
    TITLE = "Student Interactions Tracker"

    dbase: database.DBase
    """Database interface shared by all screens."""
    session: session.SessionState
    """Selected student and refresh counter. Lives as long as the app."""
    recent_limit: int
    """Number of interactions shown when no student is selected."""

    def __init__(
        self,
        dbase: database.DBase,
        recent_limit: int = history.DEFAULT_RECENT_LIMIT,
    ) -> None:
        """Set the database, then initialize the app."""
        super().__init__()
        self.dbase = dbase
        self.session = session.SessionState()
        self.recent_limit = recent_limit

    def on_mount(self) -> None:
        """Called when the app is first mounted."""
        self.open_tracker()

    def open_tracker(self) -> None:
        """Show the tracker if the database is reachable, else an error dialog."""
        try:
            self.dbase.check_connection()
        except database.ConnectivityError as err:
            textual.log(f"Connection to {self.dbase.name} failed: {err}")

            def _retry_or_exit(retry: bool | None) -> None:
                if retry:
                    self.open_tracker()
                else:
                    self.exit(message=f"Unable to connect to {self.dbase.name}")

            self.push_screen(
                error_dialogs.ConnectionErrorDialog(self.dbase.name, str(err)),
                callback=_retry_or_exit,
            )
            return
        textual.log(f"Connected to {self.dbase.name}")
        self.push_screen(
            tracker_screen.TrackerScreen(self.dbase, self.session, self.recent_limit)
        )
