"""Modal dialog for adding a student."""

import datetime

import textual
from textual import app, containers, screen, widgets

import stutrack.view
from stutrack.features import forms, validators
from stutrack.model import database, session, students_mod


class StudentDialog(screen.ModalScreen[students_mod.Student | None]):
    """A dialog for adding a new student.

    A new dialog is created each time the Add Student button is pressed, so
    every field starts at its default value. The dialog stays open if the
    student cannot be saved and is dismissed with the new student otherwise.
    """

    CSS_PATH = stutrack.view.CSS_FOLDER / "student_dialog.tcss"

    dbase: database.DBase
    """Database interface."""
    session: session.SessionState
    """Refresh counter is incremented when the student is saved."""

    def __init__(self, dbase: database.DBase, state: session.SessionState) -> None:
        super().__init__()
        self.dbase = dbase
        self.session = state

    def compose(self) -> app.ComposeResult:
        with containers.Vertical(id="student-dialog", classes="modal-dialog"):
            yield widgets.Label("Add New Student", classes="emphasis")
            with containers.VerticalScroll():
                yield widgets.Label("First Name:*")
                yield widgets.Input(
                    placeholder="Required",
                    id="s-first-name",
                    validators=[validators.NotEmpty()],
                )
                yield widgets.Label("Last Name:*")
                yield widgets.Input(
                    placeholder="Required",
                    id="s-last-name",
                    validators=[validators.NotEmpty()],
                )
                yield widgets.Label("Phone:")
                yield widgets.Input(placeholder="Optional", id="s-phone")
                yield widgets.Label("Email:")
                yield widgets.Input(placeholder="Optional", id="s-email")
                yield widgets.Label("Graduation Month:")
                yield widgets.Input(
                    placeholder="e.g., May, December", id="s-graduation-month"
                )
                yield widgets.Label("Graduation Year:")
                yield widgets.Input(
                    value=str(datetime.date.today().year),
                    id="s-graduation-year",
                    validators=[
                        validators.YearValidator(
                            forms.FIRST_GRADUATION_YEAR, forms.LAST_GRADUATION_YEAR
                        )
                    ],
                )
                yield widgets.Label("Hometown:")
                yield widgets.Input(placeholder="Optional", id="s-hometown")
                yield widgets.Label("Major:")
                yield widgets.Input(placeholder="Optional", id="s-major")
                yield widgets.Label("LinkedIn URL:")
                yield widgets.Input(placeholder="Optional", id="s-linkedin")
                yield widgets.Label("Instagram/Social Media:")
                yield widgets.Input(placeholder="Optional", id="s-social")
            with containers.Horizontal(id="student-actions"):
                yield widgets.Button("Cancel", id="cancel-student")
                yield widgets.Button("Save Student", variant="primary", id="save-student")

    def on_mount(self) -> None:
        self.query_one("#s-first-name", widgets.Input).focus()

    def _value(self, input_id: str) -> str:
        """Text from one of the dialog's input widgets."""
        return self.query_one(f"#{input_id}", widgets.Input).value

    def get_form(self) -> forms.StudentForm:
        """Collect the text from all fields."""
        return forms.StudentForm(
            first_name=self._value("s-first-name"),
            last_name=self._value("s-last-name"),
            phone=self._value("s-phone"),
            email=self._value("s-email"),
            graduation_month=self._value("s-graduation-month"),
            graduation_year=self._value("s-graduation-year"),
            hometown=self._value("s-hometown"),
            major=self._value("s-major"),
            linkedin_url=self._value("s-linkedin"),
            social_media=self._value("s-social"),
        )

    @textual.on(widgets.Button.Pressed, "#save-student")
    def save_student(self) -> None:
        """Add the student and close the dialog, or report the problem."""
        try:
            student = forms.submit_student(self.dbase, self.session, self.get_form())
        except forms.ValidationError as err:
            self.notify(str(err), severity="error")
            return
        except database.DBaseError as err:
            self.notify(
                f"Unable to add student: {err}", title="Database Error", severity="error"
            )
            return
        self.dismiss(student)

    @textual.on(widgets.Button.Pressed, "#cancel-student")
    def cancel(self) -> None:
        self.dismiss(None)
