"""Tests for the spinner, tab bar, status bar and the small UI helpers."""

import threading
import time

import pytest

from fakes import pointer_at, run_tasks
from repobrowse.ui.components.spinner import Spinner
from repobrowse.ui.components.statusbar import StatusBar
from repobrowse.ui.components.tabs import TabBar
from repobrowse.ui.keybindings import KeyMap, help_lines
from repobrowse.ui.layout import align_right, fit, join_vertical, pad_block, render_markdown, truncate
from repobrowse.ui.messages import (
    ActiveTabChanged,
    ErrorMsg,
    KeyMsg,
    MouseMsg,
    ResizeMsg,
    SelectTab,
    SpinnerTick,
)
from repobrowse.ui.tasks import Task, batch, message_task
from repobrowse.ui.zones import ZoneManager, strip_markers, visible_len, zones_in
from repobrowse.utils.locks import ReadWriteLock


class TestSpinner:
    def test_identities_are_unique(self):
        assert len({Spinner().id for _ in range(20)}) == 20

    def test_tick_yields_own_identity(self):
        spinner = Spinner()
        spinner.interval = 0

        assert spinner.tick()() == SpinnerTick(spinner.id, 0)

    def test_matching_tick_advances(self):
        spinner = Spinner()
        first = spinner.render()

        spinner, tasks = spinner.update(SpinnerTick(spinner.id, 0))

        assert spinner.render() != first
        assert len(tasks) == 1

    def test_stale_and_foreign_ticks_are_ignored(self):
        spinner = Spinner()
        spinner.update(SpinnerTick(spinner.id, 0))
        frame = spinner.render()

        _, stale = spinner.update(SpinnerTick(spinner.id, 0))
        _, foreign = spinner.update(SpinnerTick(spinner.id + 1000, 1))

        assert stale == [] and foreign == []
        assert spinner.render() == frame

    def test_unknown_spinner_name(self):
        with pytest.raises(KeyError):
            Spinner("no-such-spinner")


class TestTabBar:
    @pytest.fixture
    def tabs(self, ctx):
        tabs = TabBar(ctx, ["Readme", "Files", "Log", "Refs"])
        tabs.set_size(80, 1)
        return tabs

    def test_init_announces_active_tab(self, tabs):
        assert run_tasks(tabs.init()) == [ActiveTabChanged(0)]

    def test_tab_and_shift_tab_wrap(self, tabs):
        _, tasks = tabs.update(KeyMsg("shift+tab"))
        assert run_tasks(tasks) == [ActiveTabChanged(3)]

        _, tasks = tabs.update(KeyMsg("tab"))
        assert run_tasks(tasks) == [ActiveTabChanged(0)]

    def test_select_tab_is_clamped(self, tabs):
        _, tasks = tabs.update(SelectTab(-4))
        assert run_tasks(tasks) == [ActiveTabChanged(0)]

    def test_active_tab_changed_only_syncs(self, tabs):
        _, tasks = tabs.update(ActiveTabChanged(2))
        assert tasks == []
        assert tabs.active == 2

    def test_click_on_tab(self, ctx, tabs):
        frame = tabs.render()
        x = strip_markers(frame).index("Log")

        _, tasks = tabs.update(pointer_at(ctx.zones, frame, x, 0))

        assert run_tasks(tasks) == [ActiveTabChanged(2)]

    def test_render_marks_active(self, tabs):
        text = strip_markers(tabs.render())
        assert "[Readme]" in text
        assert " Files " in text

    def test_narrow_render_shows_active_only(self, tabs):
        tabs.set_size(10, 1)
        tabs.active = 1
        assert strip_markers(tabs.render()) == "[Files]"

    def test_other_keys_are_ignored(self, tabs):
        _, tasks = tabs.update(KeyMsg("j", "j"))
        assert tasks == []


class TestStatusBar:
    def test_render_fits_width(self, ctx):
        bar = StatusBar(ctx)
        bar.set_size(40, 1)
        bar.set_status("demo", "src/app.py", "3/10", "* main")

        line = bar.render()

        assert visible_len(line) == 40
        assert line.startswith(" demo ")
        assert line.rstrip().endswith("* main")
        assert "src/app.py" in line

    def test_value_truncated_first(self, ctx):
        bar = StatusBar(ctx)
        bar.set_size(24, 1)
        bar.set_status("demo", "a/very/long/path/to/a/file.py", "1/2", "*")

        line = bar.render()

        assert visible_len(line) == 24
        assert "1/2" in line and "demo" in line

    def test_follows_resize(self, ctx):
        bar = StatusBar(ctx)
        bar.update(ResizeMsg(30, 10))
        assert bar.width == 30


class TestZones:
    def test_render_strips_markers_and_tags_regions(self):
        zones = ZoneManager()
        frame = "ab " + zones.mark("z", "cd") + "\n" + zones.mark("block", "xy\nzw")

        text = zones.render(frame)

        assert text.plain == "ab cd\nxy\nzw"
        assert pointer_at(zones, frame, 3, 0).zones == {"z"}
        assert pointer_at(zones, frame, 1, 0).zones == frozenset()
        assert pointer_at(zones, frame, 0, 2).zones == {"block"}

    def test_nested_zones_are_all_reported(self):
        zones = ZoneManager()
        frame = zones.mark("outer", "a " + zones.mark("inner", "b") + " c")

        assert pointer_at(zones, frame, 2, 0).zones == {"outer", "inner"}
        assert pointer_at(zones, frame, 0, 0).zones == {"outer"}

    def test_in_bounds_checks_pointer_zones(self):
        zones = ZoneManager()
        assert zones.get("z").in_bounds(MouseMsg(0, 0, zones=frozenset({"z"})))
        assert not zones.get("z").in_bounds(MouseMsg(0, 0, zones=frozenset({"y"})))
        assert not zones.get("").in_bounds(MouseMsg(0, 0, zones=frozenset({""})))

    def test_zones_in_ignores_other_meta(self):
        meta = {"zone:url": True, "@click": "app.bell()", "offset": (1, 2)}
        assert zones_in(meta) == {"url"}

    def test_disabled_manager_passes_text_through(self):
        zones = ZoneManager(enabled=False)
        assert zones.mark("z", "text") == "text"
        assert zones.render("text").plain == "text"

    def test_unclosed_marker_tags_nothing(self):
        zones = ZoneManager()
        frame = zones.mark("z", "ab")[:-4]

        assert zones.render(frame).plain == "ab"
        assert pointer_at(zones, frame, 0, 0).zones == frozenset()


class TestLayout:
    def test_truncate(self):
        assert truncate("hello world", 5) == "hell…"
        assert truncate("hello", 10) == "hello"
        assert truncate("hello", 0) == ""
        assert truncate("hello world", 5, ellipsis=False) == "hello"

    def test_fit_and_align(self):
        assert fit("ab", 4) == "ab  "
        assert fit("abcdef", 3) == "abc"
        assert align_right("ab", 4) == "  ab"

    def test_pad_block_ignores_markers(self):
        zones = ZoneManager()
        block = pad_block(zones.mark("z", "ab") + "\nc\nd\ne", 4, 3)
        lines = block.split("\n")
        assert len(lines) == 3
        assert [visible_len(line) for line in lines] == [4, 4, 4]

    def test_join_vertical_skips_empty(self):
        assert join_vertical("a", "", "b") == "a\nb"

    def test_render_markdown_is_plain(self):
        lines = render_markdown("# Title\n\nSome *text*.", 40)
        text = "\n".join(lines)
        assert "Title" in text
        assert "Some text." in text
        assert "\x1b[" not in text


class TestTasks:
    def test_run_converts_exceptions(self):
        def boom():
            raise RuntimeError("boom")

        msg = Task(boom, "boom").run()

        assert isinstance(msg, ErrorMsg)
        assert str(msg.error) == "boom"

    def test_batch_flattens(self):
        a = message_task(SelectTab(1))
        b = message_task(SelectTab(2))
        assert batch(a, None, [b, None], []) == [a, b]


class TestKeyBindings:
    def test_matches_any_key(self):
        keymap = KeyMap()
        assert keymap.down.matches(KeyMsg("j", "j"))
        assert keymap.down.matches(KeyMsg("down"))
        assert not keymap.down.matches(KeyMsg("k", "k"))

    def test_help_lines(self):
        keymap = KeyMap()
        back = keymap.back.with_help("esc", "back to menu")
        assert help_lines([back, keymap.select]) == ["esc back to menu", "enter select"]
        assert keymap.back.description == "back"


class TestReadWriteLock:
    def test_readers_share(self):
        lock = ReadWriteLock()
        inside = threading.Barrier(2, timeout=5)

        def reader():
            with lock.read():
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert not any(t.is_alive() for t in threads)

    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        events = []

        def reader():
            with lock.read():
                events.append("read")

        with lock.write():
            t = threading.Thread(target=reader)
            t.start()
            time.sleep(0.05)
            events.append("write done")
        t.join(timeout=5)

        assert events == ["write done", "read"]
