"""Unit tests for working memory implementation."""

from tiermem.memory.working import WorkingMemory


class TestSessionLifecycle:
    """Test starting, clearing and restoring sessions."""

    def test_no_session_initially(self, working):
        """Test a fresh working memory has no session."""
        assert not working.has_active_session()
        assert working.get_working_context().session is None

    def test_start_session(self, working, clock):
        """Test starting a session."""
        session = working.start_session("Write blog post", "Drive signups")

        assert session.id.startswith("session-")
        assert session.task == "Write blog post"
        assert session.objective == "Drive signups"
        assert session.started_at == clock.now
        assert session.intermediate_results == {}
        assert session.scratchpad == {}
        assert session.attention_focus is None
        assert working.has_active_session()

    def test_start_replaces_previous(self, working):
        """Test starting a session discards the previous one."""
        first = working.start_session("First", "One")
        working.store_intermediate("draft", "v1")

        second = working.start_session("Second", "Two")

        assert working.session is second
        assert working.session.id != first.id
        assert working.session.intermediate_results == {}

    def test_clear_session(self, working):
        session = working.start_session("Task", "Goal")
        assert working.clear_session() is session
        assert not working.has_active_session()
        assert working.clear_session() is None

    def test_restore_session(self, working):
        session = working.start_session("Task", "Goal")
        working.clear_session()

        working.restore_session(session)

        assert working.session is session

    def test_restore_does_not_override_active(self, working):
        """Test a session started in the meantime wins over a restore."""
        old = working.start_session("Old", "Goal")
        working.clear_session()
        new = working.start_session("New", "Goal")

        working.restore_session(old)

        assert working.session is new

    def test_reset(self, working):
        working.start_session("Task", "Goal")
        working.reset()
        assert working.session is None


class TestSessionWrites:
    """Test writes to the active session."""

    def test_writes(self, working):
        working.start_session("Task", "Goal")
        working.store_intermediate("keywords", ["seo", "blog"])
        working.set_scratchpad("note", "Check tone")
        working.update_attention("outline")

        session = working.session
        assert session.intermediate_results == {"keywords": ["seo", "blog"]}
        assert session.scratchpad == {"note": "Check tone"}
        assert session.attention_focus == "outline"

    def test_overwrite_key(self, working):
        working.start_session("Task", "Goal")
        working.set_scratchpad("note", "first")
        working.set_scratchpad("note", "second")
        assert working.session.scratchpad == {"note": "second"}

    def test_writes_without_session_are_ignored(self, working):
        """Test writes without a session are silent no-ops."""
        working.store_intermediate("key", 1)
        working.set_scratchpad("note", "text")
        working.update_attention("focus")

        assert working.session is None
        assert working.get_working_context().session is None


class TestWorkingContext:
    """Test the working context snapshot."""

    def test_snapshot_is_deep_copy(self, working):
        """Test mutating the snapshot leaves the live session untouched."""
        working.start_session("Task", "Goal")
        working.store_intermediate("items", [1, 2])

        snapshot = working.get_working_context().session
        snapshot.intermediate_results["items"].append(3)
        snapshot.scratchpad["new"] = "value"

        assert working.session.intermediate_results == {"items": [1, 2]}
        assert working.session.scratchpad == {}


class TestRenderContext:
    """Test markdown rendering of the session."""

    def test_empty_without_session(self, working):
        assert working.render_context() == ""

    def test_task_only(self, working):
        working.start_session("Write post", "Drive signups")
        assert working.render_context() == "# Current Task\nWrite post\n\nObjective: Drive signups"

    def test_all_sections(self, clock):
        memory = WorkingMemory(clock=clock)
        memory.start_session("Write post", "Drive signups")
        memory.update_attention("intro")
        memory.store_intermediate("outline", {"parts": 3})
        memory.set_scratchpad("tone", "casual")

        rendered = memory.render_context()

        assert rendered.split("\n\n") == [
            "# Current Task\nWrite post",
            "Objective: Drive signups",
            "# Focus\nintro",
            '# Intermediate Results\n- outline: {"parts": 3}',
            "# Scratchpad\n- tone: casual",
        ]
