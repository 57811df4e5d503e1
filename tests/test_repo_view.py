"""Tests for the repository view's routing, status bar and rendering."""

import pytest

from fakes import FEATURE, MAIN, FakeBackend, FakePane, pointer_at, run_tasks
from repobrowse.backend.models import Repository
from repobrowse.backend.urls import clone_command
from repobrowse.exceptions import GitCommandError
from repobrowse.ui.messages import (
    ActiveTabChanged,
    BackRequested,
    CopyRequest,
    EmptyRepo,
    ErrorMsg,
    FileItems,
    KeyMsg,
    MouseButton,
    ReadmeContent,
    RefResolved,
    RepoSelected,
    ResizeMsg,
    SelectTab,
    SpinnerTick,
    SwitchTab,
    ToggleFooter,
    UpdateStatusBar,
)
from repobrowse.ui.repo_view import HELP_ZONE, RepoView, ViewState
from repobrowse.ui.zones import strip_markers

TAB_NAMES = ("Readme", "Files", "Log", "Refs")


@pytest.fixture
def panes():
    return [FakePane(name) for name in TAB_NAMES]


@pytest.fixture
def view(ctx, panes):
    view = RepoView(ctx, panes)
    view.set_size(80, 24)
    return view


@pytest.fixture
def ready_view(view, repository):
    view.update(RepoSelected(repository))
    view.update(RefResolved(MAIN))
    return view


def messages_of(tasks):
    return run_tasks(tasks)


class TestLifecycle:
    """Repository selection, ref resolution and the view state."""

    def test_repo_selected_resets_to_loading_first_tab(self, view, repository):
        view.update(RepoSelected(repository))
        view.update(RefResolved(MAIN))
        view.update(SelectTab(2))
        assert view.active_tab == 2

        view.update(RepoSelected(repository))

        assert view.state == ViewState.LOADING
        assert view.active_tab == 0
        assert view.tabs.active == 0
        assert view.ref is None

    def test_ref_resolved_after_repo_selected_is_ready(self, view, repository):
        view.update(RepoSelected(repository))
        view.update(RefResolved(MAIN))

        assert view.state == ViewState.READY
        assert view.ref == MAIN

    def test_repo_selected_resolves_head(self, view, repository):
        _, tasks = view.update(RepoSelected(repository))

        msgs = messages_of(tasks)

        assert RefResolved(MAIN) in msgs
        assert ActiveTabChanged(0) in msgs

    def test_repo_selected_on_empty_repository_yields_empty_repo(self, ctx, panes, repository):
        ctx.backend = FakeBackend(empty=True)
        view = RepoView(ctx, panes)

        _, tasks = view.update(RepoSelected(repository))

        assert EmptyRepo() in messages_of(tasks)

    def test_head_failure_yields_error_message(self, ctx, panes, repository):
        class BrokenBackend(FakeBackend):
            def head(self, repository):
                raise GitCommandError(command="rev-parse")

        ctx.backend = BrokenBackend()
        view = RepoView(ctx, panes)

        _, tasks = view.update(RepoSelected(repository))
        errors = [m for m in messages_of(tasks) if isinstance(m, ErrorMsg)]

        assert len(errors) == 1
        assert isinstance(errors[0].error, GitCommandError)

    def test_init_regenerates_spinner(self, view):
        old = view.spinner.id
        view.init()
        assert view.spinner.id != old

    def test_empty_repo_clears_ref_and_is_ready(self, ready_view, panes):
        ready_view.update(EmptyRepo())

        assert ready_view.ref is None
        assert ready_view.state == ViewState.READY
        assert ready_view.panes_ready == [True] * 4
        assert all(p.count(EmptyRepo) == 1 for p in panes)

    def test_error_makes_view_ready(self, view, repository):
        view.update(RepoSelected(repository))
        assert view.state == ViewState.LOADING

        view.update(ErrorMsg(RuntimeError("boom")))

        assert view.state == ViewState.READY

    def test_requires_panes(self, ctx):
        with pytest.raises(ValueError):
            RepoView(ctx, [])


class TestContentRouting:
    """Content results reach exactly one pane."""

    def test_result_goes_only_to_target_pane(self, ready_view, panes):
        ready_view.update(FileItems("Files", "", ()))

        assert [p.items for p in panes] == [0, 1, 0, 0]

    def test_result_for_active_pane_is_delivered_once(self, ready_view, panes):
        ready_view.update(ReadmeContent("Readme", "# hi", "README.md"))

        assert panes[0].count(ReadmeContent) == 1

    def test_result_for_unknown_pane_is_dropped(self, ready_view, panes):
        ready_view.update(FileItems("Blame", "", ()))

        assert [p.items for p in panes] == [0, 0, 0, 0]

    def test_result_marks_pane_ready(self, ready_view):
        assert ready_view.panes_ready == [False] * 4

        ready_view.update(FileItems("Files", "", ()))

        assert ready_view.panes_ready == [False, True, False, False]


class TestSpinnerRouting:
    """Ticks reach at most one spinner."""

    def test_own_tick_while_loading_advances_spinner(self, view, repository, panes):
        view.update(RepoSelected(repository))
        before = view.spinner.render()

        _, tasks = view.update(SpinnerTick(view.spinner.id, 0))

        assert view.spinner.render() != before
        assert [t.name for t in tasks] == [f"spinner-{view.spinner.id}"]
        assert all(p.count(SpinnerTick) == 0 for p in panes)

    def test_tick_goes_to_first_matching_pane(self, ready_view, panes):
        panes[2].spinner = 42
        panes[3].spinner = 42

        ready_view.update(SpinnerTick(42))

        assert [p.count(SpinnerTick) for p in panes] == [0, 0, 1, 0]

    def test_tick_for_active_pane_is_delivered_once(self, ready_view, panes):
        panes[0].spinner = 7

        ready_view.update(SpinnerTick(7))

        assert panes[0].count(SpinnerTick) == 1

    def test_unknown_tick_changes_nothing(self, ready_view, panes):
        frame = ready_view.spinner.render()

        _, tasks = ready_view.update(SpinnerTick(123456))

        assert tasks == []
        assert ready_view.spinner.render() == frame
        assert all(p.count(SpinnerTick) == 0 for p in panes)

    def test_own_tick_after_ready_is_not_consumed(self, ready_view):
        frame = ready_view.spinner.render()

        ready_view.update(SpinnerTick(ready_view.spinner.id, 0))

        assert ready_view.spinner.render() == frame


class TestTabs:
    def test_switch_tab_by_name(self, ready_view):
        _, tasks = ready_view.update(SwitchTab("Log"))
        msgs = messages_of(tasks)
        assert SelectTab(2) in msgs

        for msg in msgs:
            ready_view.update(msg)

        assert ready_view.active_tab == 2

    def test_switch_tab_unknown_name_is_ignored(self, ready_view):
        _, tasks = ready_view.update(SwitchTab("Blame"))

        assert not any(isinstance(m, SelectTab) for m in messages_of(tasks))
        assert ready_view.active_tab == 0

    def test_tab_key_cycles_through_tab_bar(self, ready_view):
        _, tasks = ready_view.update(KeyMsg("tab"))
        for msg in messages_of(tasks):
            ready_view.update(msg)

        assert ready_view.active_tab == 1
        assert ready_view.statusbar.value == "Files value"

    def test_shift_tab_wraps(self, ready_view):
        _, tasks = ready_view.update(KeyMsg("shift+tab"))
        for msg in messages_of(tasks):
            ready_view.update(msg)

        assert ready_view.active_tab == 3

    def test_select_tab_is_clamped(self, ready_view):
        ready_view.update(SelectTab(99))
        assert ready_view.active_tab == 3


class TestDelivery:
    """Each component sees a message at most once per update."""

    def test_repo_selected_reaches_every_pane_once(self, view, repository, panes):
        view.update(RepoSelected(repository))
        assert [p.count(RepoSelected) for p in panes] == [1, 1, 1, 1]

    def test_ref_resolved_reaches_every_pane_once(self, ready_view, panes):
        assert [p.count(RefResolved) for p in panes] == [1, 1, 1, 1]

    def test_resize_reaches_every_pane_once(self, view, panes):
        view.update(ResizeMsg(100, 30))
        assert [p.count(ResizeMsg) for p in panes] == [1, 1, 1, 1]

    def test_input_goes_to_active_pane_only(self, ready_view, panes):
        ready_view.update(KeyMsg("j", "j"))
        assert [p.count(KeyMsg) for p in panes] == [1, 0, 0, 0]

    def test_unhandled_message_is_forwarded_to_active_pane(self, ready_view, panes):
        ready_view.update(UpdateStatusBar())
        ready_view.update(ToggleFooter())

        assert panes[0].count(UpdateStatusBar) == 1
        assert panes[0].count(ToggleFooter) == 1
        assert len(panes[1].received) == 2


class TestStatusBar:
    def test_status_after_ref(self, ready_view):
        bar = ready_view.statusbar
        assert bar.key == "demo"
        assert bar.value == "Readme value"
        assert bar.info == "Readme info"
        assert bar.extra == "* main"

    def test_status_without_ref(self, view, repository):
        view.update(RepoSelected(repository))
        assert view.statusbar.extra == "*"

    def test_copy_request_uses_clipboard_and_shows_message(self, ready_view, copied):
        ready_view.update(CopyRequest("git clone x", "Copied!"))

        assert copied == ["git clone x"]
        bar = ready_view.statusbar
        assert (bar.key, bar.value, bar.info, bar.extra) == ("", "Copied!", "", "")

    def test_clipboard_failure_is_not_raised(self, ctx, ready_view):
        def broken(text):
            raise RuntimeError("no clipboard")

        ctx.clipboard = broken

        ready_view.update(CopyRequest("git clone x", "Copied!"))

        assert ready_view.statusbar.value == "Copied!"


class TestPointer:
    """Clicks carry the zones Rich reports under the pointer."""

    def locate(self, frame, text):
        for y, line in enumerate(strip_markers(frame).split("\n")):
            if text in line:
                return line.index(text), y
        raise AssertionError(f"{text!r} not on screen")

    def test_click_on_clone_url_requests_copy(self, ready_view):
        frame = ready_view.render()
        x, y = self.locate(frame, "git clone")

        _, tasks = ready_view.update(pointer_at(ready_view.ctx.zones, frame, x, y))

        expected = clone_command("ssh://example.com", "demo")
        assert CopyRequest(expected, "Command copied to clipboard") in messages_of(tasks)

    def test_right_click_in_main_goes_back(self, ready_view):
        frame = ready_view.render()
        x, y = self.locate(frame, "Readme body")

        click = pointer_at(ready_view.ctx.zones, frame, x, y, MouseButton.RIGHT)
        _, tasks = ready_view.update(click)

        assert BackRequested() in messages_of(tasks)

    def test_left_click_in_main_does_not_go_back(self, ready_view):
        frame = ready_view.render()
        x, y = self.locate(frame, "Readme body")

        _, tasks = ready_view.update(pointer_at(ready_view.ctx.zones, frame, x, y))

        assert BackRequested() not in messages_of(tasks)

    def test_right_click_outside_main_does_nothing(self, ready_view):
        frame = ready_view.render()
        x, y = self.locate(frame, "A demo repo")

        click = pointer_at(ready_view.ctx.zones, frame, x, y, MouseButton.RIGHT)
        _, tasks = ready_view.update(click)

        assert BackRequested() not in messages_of(tasks)

    def test_left_click_on_help_toggles_footer(self, ready_view):
        frame = ready_view.render() + "\n" + ready_view.ctx.zones.mark(HELP_ZONE, "? help")
        x, y = self.locate(frame, "? help")

        _, tasks = ready_view.update(pointer_at(ready_view.ctx.zones, frame, x, y))

        assert ToggleFooter() in messages_of(tasks)

    def test_wheel_over_clone_url_does_not_copy(self, ready_view):
        frame = ready_view.render()
        x, y = self.locate(frame, "git clone")

        wheel = pointer_at(ready_view.ctx.zones, frame, x, y, MouseButton.WHEEL_DOWN)
        _, tasks = ready_view.update(wheel)

        assert not any(isinstance(m, CopyRequest) for m in messages_of(tasks))


class TestRender:
    def test_loading_shows_spinner(self, view, repository):
        view.update(RepoSelected(repository))

        text = strip_markers(view.render())

        assert "loading…" in text
        assert "Readme body" not in text

    def test_ready_shows_active_pane_and_status(self, ready_view):
        lines = strip_markers(ready_view.render()).split("\n")

        assert len(lines) == 24
        assert any("Readme body" in line for line in lines)
        assert "demo" in lines[-1] and "* main" in lines[-1]

    def test_header(self, ready_view):
        lines = strip_markers(ready_view.render()).split("\n")

        assert lines[0].startswith("Demo Project")
        assert lines[1].startswith("A demo repo")
        assert lines[1].rstrip().endswith("git clone git@example.com:demo.git")

    def test_header_without_description(self, view):
        view.update(RepoSelected(Repository(name="bare")))

        name_line, desc_line = view.header_view().split("\n")
        assert name_line == ""
        assert strip_markers(desc_line).startswith("bare ")

    def test_panes_sized_to_main_region(self, view, panes):
        view.update(ResizeMsg(100, 30))
        assert (panes[0].width, panes[0].height) == (100, 30 - 4 - 2)

    def test_help_combines_common_and_pane_bindings(self, ready_view):
        short = ready_view.short_help()
        assert [b.help_text() for b in short[:2]] == ["esc back to menu", "tab switch tab"]
        assert ready_view.full_help()[0] == short[:2]

    def test_feature_ref_in_status(self, ready_view):
        ready_view.update(RefResolved(FEATURE))
        assert ready_view.statusbar.extra == "* feature"
