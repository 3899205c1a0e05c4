"""Browse students, log interactions, and review interaction history."""

from typing import Optional

import rich.text

import textual
from textual import app, binding, containers, dom, message, reactive, screen, widgets

import stutrack.view
from stutrack.features import forms, history, validators
from stutrack.model import database, interactions_mod, session, students_mod
from stutrack.view import student_dialog


def show_db_error(node: dom.DOMNode, err: database.DBaseError) -> None:
    """Report a failed database operation without closing the screen."""
    textual.log(f"Database error: {err}")
    node.app.notify(str(err), title="Database Error", severity="error", timeout=8)


class StudentCard(widgets.ListItem):
    """A student in the student directory."""

    student: students_mod.Student

    def __init__(self, student: students_mod.Student, selected: bool) -> None:
        """Highlight the card if the student is selected."""
        super().__init__(classes="student-card")
        self.student = student
        self.set_class(selected, "-selected")

    def compose(self) -> app.ComposeResult:
        """Name on the first line, major and graduation year below."""
        yield widgets.Label(
            rich.text.Text(self.student.full_name, style="bold"),
            classes="student-name",
        )
        yield widgets.Label(
            rich.text.Text(self.student.summary), classes="student-summary"
        )


class StudentDirectory(containers.Vertical):
    """Searchable list of students."""

    class StudentSelected(message.Message):
        """Sent when the user picks a student from the list."""

        student_id: int

        def __init__(self, student_id: int) -> None:
            """Set the ID of the selected student."""
            super().__init__()
            self.student_id = student_id

    dbase: database.DBase
    """Database interface."""
    roster: list[students_mod.Student]
    """All students, reloaded when refresh_count changes."""
    visible_students: list[students_mod.Student]
    """Students matching the current search text."""

    selected_student_id: reactive.reactive[Optional[int]] = reactive.reactive(
        None, init=False
    )
    refresh_count = reactive.reactive(0, init=False)
    search_text = reactive.reactive("", init=False)

    def __init__(self, dbase: database.DBase, *args, **kwargs) -> None:
        """Set link to database."""
        super().__init__(*args, **kwargs)
        self.dbase = dbase
        self.roster = []
        self.visible_students = []

    def compose(self) -> app.ComposeResult:
        """Search box, add button, and the student list."""
        yield widgets.Label("Student Directory", classes="emphasis")
        yield widgets.Input(placeholder="Search by name...", id="student-search")
        yield widgets.Button(
            "+ Add New Student",
            variant="success",
            id="add-student",
            tooltip="Add a new student to the directory.",
        )
        yield widgets.Rule()
        yield widgets.ListView(id="student-list")
        yield widgets.Static(
            "No students found", id="roster-empty", classes="empty-message"
        )

    def on_mount(self) -> None:
        """Load the roster."""
        self.load_roster()

    def load_roster(self) -> None:
        """Read all students from the database and redisplay the list."""
        textual.log(f"Loading roster, refresh_count={self.refresh_count}")
        try:
            self.roster = students_mod.Student.get_all(self.dbase)
        except database.DBaseError as err:
            show_db_error(self, err)
        self.show_students()

    def show_students(self) -> None:
        """Rebuild the list from the roster and the search text."""
        self.visible_students = students_mod.filter_students(
            self.roster, self.search_text
        )
        list_view = self.query_one("#student-list", widgets.ListView)
        list_view.clear()
        list_view.extend(
            StudentCard(student, student.student_id == self.selected_student_id)
            for student in self.visible_students
        )
        list_view.display = bool(self.visible_students)
        self.query_one("#roster-empty", widgets.Static).display = not (
            self.visible_students
        )

    def watch_refresh_count(self) -> None:
        """Reload students after a database write."""
        if not self.is_mounted:
            return
        self.load_roster()

    def watch_search_text(self) -> None:
        """Filter the list as the user types."""
        if not self.is_mounted:
            return
        self.show_students()

    def watch_selected_student_id(self) -> None:
        """Move the highlight to the newly selected student."""
        for card in self.query(StudentCard):
            card.set_class(
                card.student.student_id == self.selected_student_id, "-selected"
            )

    @textual.on(widgets.Input.Changed, "#student-search")
    def on_search_changed(self, message: widgets.Input.Changed) -> None:
        """Update the search text."""
        self.search_text = message.value

    @textual.on(widgets.ListView.Selected, "#student-list")
    def on_student_clicked(self, message: widgets.ListView.Selected) -> None:
        """Tell the screen which student was picked."""
        if isinstance(message.item, StudentCard):
            student_id = message.item.student.student_id
            if student_id is not None:
                self.post_message(self.StudentSelected(student_id))


class SelectedStudentPanel(widgets.Static):
    """Details of the student who will receive the next interaction."""

    dbase: database.DBase
    """Database interface."""
    student: Optional[students_mod.Student]
    """Currently selected student."""
    interaction_count: int
    """Interactions recorded for the selected student."""

    selected_student_id: reactive.reactive[Optional[int]] = reactive.reactive(
        None, init=False
    )
    refresh_count = reactive.reactive(0, init=False)

    def __init__(self, dbase: database.DBase, *args, **kwargs) -> None:
        """Set link to database."""
        super().__init__(*args, **kwargs)
        self.dbase = dbase
        self.student = None
        self.interaction_count = 0

    def on_mount(self) -> None:
        self.show_student()

    def show_student(self) -> None:
        """Display the selected student or a hint to select one."""
        self.student = None
        self.interaction_count = 0
        if self.selected_student_id is not None:
            try:
                self.student = students_mod.Student.get_by_id(
                    self.dbase, self.selected_student_id
                )
                self.interaction_count = (
                    interactions_mod.Interaction.count_for_student(
                        self.dbase, self.selected_student_id
                    )
                )
            except database.DBaseError as err:
                show_db_error(self, err)
        self.set_class(self.student is not None, "-selected")
        if self.student is None:
            self.update(
                rich.text.Text(
                    "Select a student from the left to log an interaction",
                    style="italic",
                )
            )
            return
        self.update(
            rich.text.Text.assemble(
                (self.student.full_name, "bold"),
                "\n",
                ("Major: ", "bold"),
                self.student.major or "",
                "\n",
                ("Grad: ", "bold"),
                self.student.graduation,
                "\n",
                ("Email: ", "bold"),
                self.student.email or "",
                "\n",
                ("Interactions: ", "bold"),
                str(self.interaction_count),
            )
        )

    def watch_selected_student_id(self) -> None:
        if self.is_mounted:
            self.show_student()

    def watch_refresh_count(self) -> None:
        if self.is_mounted:
            self.show_student()


class HistoryEntry(widgets.Static):
    """One interaction in the history list."""


class HistoryPanel(containers.Vertical):
    """Recent interactions, or all interactions with the selected student."""

    dbase: database.DBase
    """Database interface."""
    recent_limit: int
    """Number of interactions shown when no student is selected."""
    title_text: str
    """Heading above the interaction list."""
    interactions: list[interactions_mod.Interaction]
    """Interactions currently displayed."""

    selected_student_id: reactive.reactive[Optional[int]] = reactive.reactive(
        None, init=False
    )
    refresh_count = reactive.reactive(0, init=False)

    def __init__(
        self, dbase: database.DBase, recent_limit: int, *args, **kwargs
    ) -> None:
        """Set link to database."""
        super().__init__(*args, **kwargs)
        self.dbase = dbase
        self.recent_limit = recent_limit
        self.title_text = history.RECENT_TITLE
        self.interactions = []

    def compose(self) -> app.ComposeResult:
        """Title and a scrolling list of interactions."""
        yield widgets.Label(self.title_text, id="history-title", classes="emphasis")
        yield widgets.Rule()
        yield containers.VerticalScroll(id="history-entries")

    def on_mount(self) -> None:
        self.load_history()

    def load_history(self) -> None:
        """Query the database and rebuild the list."""
        textual.log(
            f"Loading history for student {self.selected_student_id}, "
            f"refresh_count={self.refresh_count}"
        )
        try:
            self.title_text = history.history_title(
                self.dbase, self.selected_student_id
            )
            self.interactions = history.load_history(
                self.dbase, self.selected_student_id, self.recent_limit
            )
        except database.DBaseError as err:
            show_db_error(self, err)
            return
        self.query_one("#history-title", widgets.Label).update(
            rich.text.Text(self.title_text)
        )
        entries = self.query_one("#history-entries", containers.VerticalScroll)
        entries.remove_children()
        if not self.interactions:
            entries.mount(
                widgets.Static(history.EMPTY_MESSAGE, classes="empty-message")
            )
            return
        entries.mount_all(
            HistoryEntry(self._format_entry(interaction), classes="history-entry")
            for interaction in self.interactions
        )

    def _format_entry(
        self, interaction: interactions_mod.Interaction
    ) -> rich.text.Text:
        """Student name (only for the all-students view), date line, and notes."""
        text = rich.text.Text()
        if self.selected_student_id is None:
            text.append(interaction.student_name + "\n", style="bold dodger_blue1")
        text.append(history.entry_heading(interaction) + "\n", style="dim")
        text.append(interaction.notes)
        return text

    def watch_selected_student_id(self) -> None:
        if self.is_mounted:
            self.load_history()

    def watch_refresh_count(self) -> None:
        if self.is_mounted:
            self.load_history()


class TrackerScreen(screen.Screen):
    """Student directory, interaction log form, and interaction history."""

    dbase: database.DBase
    """Database interface."""
    session: session.SessionState
    """Selected student and refresh counter for this session."""
    recent_limit: int
    """Number of interactions shown when no student is selected."""

    CSS_PATH = stutrack.view.CSS_FOLDER / "tracker_screen.tcss"
    BINDINGS = [
        binding.Binding("ctrl+n", "add_student", "Add Student", show=True),
        binding.Binding("ctrl+f", "focus_search", "Search", show=True),
        binding.Binding("ctrl+s", "save_interaction", "Save Interaction", show=True),
    ]

    # Mirrors of the session state. Assigning a new value notifies every
    #   data-bound widget.
    selected_student_id: reactive.reactive[Optional[int]] = reactive.reactive(None)
    refresh_count = reactive.reactive(0)

    def __init__(
        self,
        dbase: database.DBase,
        state: session.SessionState,
        recent_limit: int = history.DEFAULT_RECENT_LIMIT,
    ) -> None:
        """Set the database and the session state."""
        super().__init__()
        self.dbase = dbase
        self.session = state
        self.recent_limit = recent_limit
        self.set_reactive(TrackerScreen.selected_student_id, state.selected_student_id)
        self.set_reactive(TrackerScreen.refresh_count, state.refresh)

    def compose(self) -> app.ComposeResult:
        """Build the three-pane layout."""
        yield widgets.Header()
        with containers.Horizontal():
            directory = StudentDirectory(self.dbase, id="directory-pane")
            directory.data_bind(
                TrackerScreen.selected_student_id, TrackerScreen.refresh_count
            )
            yield directory
            with containers.VerticalScroll(id="log-pane"):
                yield widgets.Label("Log Interaction", classes="emphasis")
                selected_panel = SelectedStudentPanel(
                    self.dbase, id="selected-student"
                )
                selected_panel.data_bind(
                    TrackerScreen.selected_student_id, TrackerScreen.refresh_count
                )
                yield selected_panel
                yield widgets.Label("Date:")
                yield widgets.Input(
                    forms.default_date(),
                    id="interaction-date",
                    validators=[validators.DateValidator()],
                )
                yield widgets.Label("Time:")
                yield widgets.Input(
                    forms.default_time(),
                    id="interaction-time",
                    validators=[validators.TimeValidator()],
                )
                yield widgets.Label("Location:")
                yield widgets.Input(
                    placeholder="e.g., Office, Hallway, Cafeteria",
                    id="interaction-location",
                )
                yield widgets.Label("Notes:")
                yield widgets.TextArea(id="interaction-notes")
                yield widgets.Button(
                    "Save Interaction", variant="primary", id="save-interaction"
                )
            history_panel = HistoryPanel(
                self.dbase, self.recent_limit, id="history-pane"
            )
            history_panel.data_bind(
                TrackerScreen.selected_student_id, TrackerScreen.refresh_count
            )
            yield history_panel
        yield widgets.Footer()

    def sync_session(self) -> None:
        """Copy the session state to the reactive attributes."""
        self.selected_student_id = self.session.selected_student_id
        self.refresh_count = self.session.refresh

    def select_student(self, student_id: int) -> None:
        """Make a student the target of new interactions."""
        self.session.select(student_id)
        self.sync_session()

    @textual.on(StudentDirectory.StudentSelected)
    def on_student_selected(self, message: StudentDirectory.StudentSelected) -> None:
        """Handle a click in the student directory."""
        self.select_student(message.student_id)

    def action_focus_search(self) -> None:
        """Put the cursor in the search box."""
        self.query_one("#student-search", widgets.Input).focus()

    @textual.on(widgets.Button.Pressed, "#save-interaction")
    def action_save_interaction(self) -> None:
        """Validate the form and save the interaction."""
        location_input = self.query_one("#interaction-location", widgets.Input)
        notes_input = self.query_one("#interaction-notes", widgets.TextArea)
        time_input = self.query_one("#interaction-time", widgets.Input)
        form = forms.InteractionForm(
            interaction_date=self.query_one("#interaction-date", widgets.Input).value,
            interaction_time=time_input.value,
            location=location_input.value,
            notes=notes_input.text,
        )
        try:
            forms.submit_interaction(self.dbase, self.session, form)
        except forms.ValidationError as err:
            self.notify(str(err), severity="error")
            return
        except database.DBaseError as err:
            show_db_error(self, err)
            return
        location_input.value = ""
        notes_input.clear()
        time_input.value = forms.default_time()
        self.sync_session()
        self.notify("Interaction saved successfully!")

    @textual.on(widgets.Button.Pressed, "#add-student")
    def action_add_student(self) -> None:
        """Show the student dialog. The dialog saves the new student."""

        def on_dialog_closed(student: students_mod.Student | None) -> None:
            if student is None:
                return
            self.sync_session()
            self.notify("Student added successfully!")

        self.app.push_screen(
            student_dialog.StudentDialog(self.dbase, self.session),
            callback=on_dialog_closed,
        )
