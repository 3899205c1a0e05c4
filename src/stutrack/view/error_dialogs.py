"""Error Dialogs."""

from textual import app, containers, screen, widgets

import stutrack.view


class ConnectionErrorDialog(screen.ModalScreen[bool]):
    """Shown when the database cannot be reached at startup.

    Dismissed with True if the user wants to try again, False to quit.
    """

    CSS_PATH = stutrack.view.CSS_FOLDER / "error_dialogs.tcss"

    db_name: str
    """Database location, without the password."""
    message: str
    """Error message from the database driver."""

    def __init__(self, db_name: str, message: str) -> None:
        """Include the database location and error in the dialog."""
        super().__init__()
        self.db_name = db_name
        self.message = message

    def compose(self) -> app.ComposeResult:
        """Layout the dialog box."""
        with containers.Vertical(id="connection-dialog", classes="modal-dialog"):
            yield widgets.Label("[bold red]Database Connection Error[/bold red]")
            yield widgets.Static()
            yield widgets.Label("Unable to connect to:")
            yield widgets.Label(self.db_name, id="connection-db-name", markup=False)
            yield widgets.Static()
            yield widgets.Label(self.message, id="connection-message", markup=False)
            yield widgets.Static()
            with containers.Horizontal():
                yield widgets.Button("Retry", variant="primary", id="retry-connection")
                yield widgets.Button("Quit", variant="error", id="quit-app")

    def on_button_pressed(self, event: widgets.Button.Pressed) -> None:
        if event.button.id == "retry-connection":
            self.dismiss(True)
        elif event.button.id == "quit-app":
            self.dismiss(False)
