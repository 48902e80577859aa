"""Tests for the built-in tools, run through the registry."""

import pytest

from agent.modes import Mode
from agent.registry import SubagentOutcome
from agent.tools import needs_permission
from core.events import MODE_CHANGED, PERMISSION_ASKED
from core.permissions import PermissionBroker

from conftest import RecordingEventBus, make_broker, make_context


class TestFileRead:
    """Tests for the file_read tool."""

    @pytest.mark.asyncio
    async def test_reads_numbered_lines(self, registry, broker, project_dir):
        context = make_context(broker, project_dir, Mode.EXPLORE)
        result = await registry.execute("file_read", {"file_path": "src/main.py"}, context)

        assert result.success
        assert result.output == "     1\tdef main():\n     2\t    return 1"
        assert result.metadata["total_lines"] == 2

    @pytest.mark.asyncio
    async def test_offset_and_limit(self, registry, broker, project_dir):
        (project_dir / "long.txt").write_text("\n".join(f"line {n}" for n in range(1, 11)))
        context = make_context(broker, project_dir)
        result = await registry.execute("file_read", {"file_path": "long.txt", "offset": 3, "limit": 2}, context)

        assert result.output.startswith("     3\tline 3\n     4\tline 4")
        assert "[Showing lines 3-4 of 10]" in result.output

    @pytest.mark.asyncio
    async def test_traversal_refused(self, registry, broker, project_dir):
        context = make_context(broker, project_dir)
        result = await registry.execute("file_read", {"file_path": "../../etc/passwd"}, context)

        assert not result.success
        assert result.output == "Path traversal detected: ../../etc/passwd"

    @pytest.mark.asyncio
    async def test_missing_file(self, registry, broker, project_dir):
        context = make_context(broker, project_dir)
        result = await registry.execute("file_read", {"file_path": "nope.txt"}, context)

        assert not result.success
        assert result.output == "File not found: nope.txt"


class TestFileWrite:
    """Tests for the file_write tool."""

    @pytest.mark.asyncio
    async def test_new_file_asks_write(self, registry, project_dir):
        broker = make_broker("once")
        context = make_context(broker, project_dir)
        result = await registry.execute("file_write", {"file_path": "out/new.txt", "content": "hello\n"}, context)

        assert result.success
        assert (project_dir / "out" / "new.txt").read_text() == "hello\n"
        [asked] = broker.event_bus.of_type(PERMISSION_ASKED)
        assert asked.properties["permission"] == "write"
        assert asked.properties["patterns"] == [str(project_dir / "out" / "new.txt")]
        assert asked.properties["session_id"] == "ses_test"

    @pytest.mark.asyncio
    async def test_existing_file_asks_edit(self, registry, project_dir):
        broker = make_broker("once")
        context = make_context(broker, project_dir)
        await registry.execute("file_write", {"file_path": "src/main.py", "content": "x = 1\n"}, context)

        [asked] = broker.event_bus.of_type(PERMISSION_ASKED)
        assert asked.properties["permission"] == "edit"
        assert (project_dir / "src" / "main.py").read_text() == "x = 1\n"

    @pytest.mark.asyncio
    async def test_rejected_write_leaves_file_alone(self, registry, rejecting_broker, project_dir):
        context = make_context(rejecting_broker, project_dir)
        result = await registry.execute("file_write", {"file_path": "src/main.py", "content": "gone"}, context)

        assert not result.success
        assert result.output == "Permission denied: not now"
        assert (project_dir / "src" / "main.py").read_text() == "def main():\n    return 1\n"

    @pytest.mark.asyncio
    async def test_planner_writes_docs_only(self, registry, approving_broker, project_dir):
        context = make_context(approving_broker, project_dir, Mode.PLANNER)

        allowed = await registry.execute("file_write", {"file_path": "docs/plan.md", "content": "# Plan"}, context)
        denied = await registry.execute("file_write", {"file_path": "src/app.py", "content": "x"}, context)

        assert allowed.success
        assert not denied.success
        assert denied.output.startswith("PLANNER mode can only write to docs/.")
        assert not (project_dir / "src" / "app.py").exists()

    @pytest.mark.asyncio
    async def test_mode_denial_never_asks(self, registry, project_dir):
        """A write the mode forbids is refused before any prompt."""
        broker = make_broker("once")
        context = make_context(broker, project_dir, Mode.PLAN_PRD)
        result = await registry.execute("file_write", {"file_path": "docs/plan.md", "content": "x"}, context)

        assert not result.success
        assert broker.event_bus.events == []

    @pytest.mark.asyncio
    async def test_symlink_escape_refused(self, registry, approving_broker, project_dir, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (project_dir / "link").symlink_to(outside)
        context = make_context(approving_broker, project_dir)

        result = await registry.execute("file_write", {"file_path": "link/evil.sh", "content": "x"}, context)

        assert not result.success
        assert result.output == "Symlink bypass detected: link/evil.sh"
        assert not (outside / "evil.sh").exists()


class TestFileEdit:
    """Tests for the file_edit tool."""

    @pytest.mark.asyncio
    async def test_replaces_unique_match(self, registry, approving_broker, project_dir):
        context = make_context(approving_broker, project_dir)
        result = await registry.execute(
            "file_edit",
            {"file_path": "src/main.py", "old_string": "return 1", "new_string": "return 2"},
            context,
        )

        assert result.success
        assert result.output == "Edited src/main.py: 1 replacement(s)"
        assert "return 2" in (project_dir / "src" / "main.py").read_text()

    @pytest.mark.asyncio
    async def test_ambiguous_match(self, registry, approving_broker, project_dir):
        (project_dir / "dup.txt").write_text("a a a")
        context = make_context(approving_broker, project_dir)

        result = await registry.execute(
            "file_edit", {"file_path": "dup.txt", "old_string": "a", "new_string": "b"}, context
        )
        assert not result.success
        assert "found 3 times" in result.output

        result = await registry.execute(
            "file_edit",
            {"file_path": "dup.txt", "old_string": "a", "new_string": "b", "replace_all": True},
            context,
        )
        assert result.success
        assert (project_dir / "dup.txt").read_text() == "b b b"

    @pytest.mark.asyncio
    async def test_hidden_in_planner(self, registry, approving_broker, project_dir):
        context = make_context(approving_broker, project_dir, Mode.PLANNER)
        result = await registry.execute(
            "file_edit", {"file_path": "docs/a.md", "old_string": "a", "new_string": "b"}, context
        )

        assert not result.success
        assert result.output == "Tool file_edit is not available in PLANNER mode"


class TestSearch:
    """Tests for the glob and grep tools."""

    @pytest.mark.asyncio
    async def test_glob(self, registry, broker, project_dir):
        (project_dir / "src" / "util.py").write_text("")
        (project_dir / "README.md").write_text("")
        context = make_context(broker, project_dir, Mode.EXPLORE)

        result = await registry.execute("glob", {"pattern": "**/*.py"}, context)

        assert result.success
        assert set(result.output.split("\n")) == {"src/main.py", "src/util.py"}

    @pytest.mark.asyncio
    async def test_grep(self, registry, broker, project_dir):
        context = make_context(broker, project_dir, Mode.EXPLORE)
        result = await registry.execute("grep", {"pattern": r"def \w+", "include": "*.py"}, context)

        assert result.success
        assert result.output == "src/main.py:1: def main():"

    @pytest.mark.asyncio
    async def test_grep_invalid_regex(self, registry, broker, project_dir):
        context = make_context(broker, project_dir)
        result = await registry.execute("grep", {"pattern": "("}, context)

        assert not result.success
        assert result.output.startswith("Invalid regex pattern")

    @pytest.mark.asyncio
    async def test_search_root_outside_refused(self, registry, broker, project_dir):
        context = make_context(broker, project_dir)
        result = await registry.execute("grep", {"pattern": "root", "path": "/etc"}, context)

        assert not result.success
        assert result.output.startswith("Path traversal detected")


class TestBash:
    """Tests for the bash tool."""

    def test_safe_commands_need_no_permission(self, project_dir):
        assert needs_permission("ls -la", str(project_dir)) == (False, None)
        assert needs_permission("git status", str(project_dir)) == (False, None)
        assert needs_permission("cat src/main.py", str(project_dir)) == (False, None)

    def test_destructive_commands_always_ask(self, project_dir):
        needed, reason = needs_permission("rm -rf build", str(project_dir))
        assert needed
        assert reason == "Destructive command: rm"

    def test_shell_operators_ask(self, project_dir):
        needed, reason = needs_permission("ls && curl example.com", str(project_dir))
        assert needed
        assert reason == "Command uses shell operators"

    def test_paths_outside_ask(self, project_dir):
        needed, reason = needs_permission("cat /etc/passwd", str(project_dir))
        assert needed
        assert reason.startswith("Path outside working directory")

    def test_unknown_commands_ask(self, project_dir):
        assert needs_permission("make deploy", str(project_dir)) == (True, "Unknown command")

    def test_safe_command_options_that_write_ask(self, project_dir):
        needed, reason = needs_permission("find . -name '*.pyc' -delete", str(project_dir))
        assert needed
        assert reason == "Command uses option -delete"

        assert needs_permission("git branch -D feature", str(project_dir))[0]
        assert needs_permission("rg --pre ./decode.sh TODO", str(project_dir))[0]
        assert needs_permission("find . -name '*.py'", str(project_dir)) == (False, None)
        assert needs_permission("git branch -a", str(project_dir)) == (False, None)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "command",
        [
            "find . -delete",
            "find . -exec rm {} +",
            "find . -execdir rm {} ;",
            "find . -ok rm {} ;",
            "find . -fprint listing.txt",
            "awk 'BEGIN{system(\"rm -rf x\")}'",
        ],
    )
    async def test_side_effecting_commands_ask(self, registry, rejecting_broker, project_dir, command):
        context = make_context(rejecting_broker, project_dir)
        result = await registry.execute("bash", {"command": command}, context)

        assert not result.success
        [asked] = rejecting_broker.event_bus.of_type(PERMISSION_ASKED)
        assert asked.properties["patterns"] == [command]

    @pytest.mark.asyncio
    async def test_safe_command_runs_without_prompt(self, registry, broker, project_dir):
        context = make_context(broker, project_dir)
        result = await registry.execute("bash", {"command": "echo hello"}, context)

        assert result.success
        assert result.output == "hello"
        assert broker.event_bus.events == []

    @pytest.mark.asyncio
    async def test_dangerous_command_prompt_carries_warning(self, registry, rejecting_broker, project_dir):
        context = make_context(rejecting_broker, project_dir)
        result = await registry.execute("bash", {"command": "rm -rf build"}, context)

        assert not result.success
        assert result.output == "Permission denied: not now"
        [asked] = rejecting_broker.event_bus.of_type(PERMISSION_ASKED)
        assert asked.properties["permission"] == "bash"
        assert asked.properties["patterns"] == ["rm -rf build"]
        assert asked.properties["metadata"]["is_dangerous"] is True

    @pytest.mark.asyncio
    async def test_failed_command(self, registry, approving_broker, project_dir):
        context = make_context(approving_broker, project_dir)
        result = await registry.execute("bash", {"command": "exit 3"}, context)

        assert not result.success
        assert result.metadata["exit_code"] == 3


class TestTask:
    """Tests for the task tool."""

    @staticmethod
    def runner_calling(tool_name, raw_input):
        """Subagent runner that makes one tool call and reports its result."""
        async def runner(subagent, prompt, description, execute):
            result = await execute(tool_name, raw_input)
            return SubagentOutcome(success=result.success, output=result.output, actions=[tool_name])
        return runner

    @pytest.mark.asyncio
    async def test_explore_subagent_in_planner(self, registry, broker, project_dir):
        context = make_context(
            broker, project_dir, Mode.PLANNER,
            subagent_runner=self.runner_calling("file_read", {"file_path": "src/main.py"}),
        )
        result = await registry.execute(
            "task", {"description": "Read main", "prompt": "Read src/main.py", "subagent_type": "explore"}, context
        )

        assert result.success
        assert result.output.startswith("Actions taken:\n  - file_read\n\nResult:\n     1\tdef main():")
        assert result.metadata["agent_type"] == "explore"
        assert broker.event_bus.events == []

    @pytest.mark.asyncio
    async def test_general_subagent_refused_in_planner(self, registry, broker, project_dir):
        context = make_context(broker, project_dir, Mode.PLANNER, subagent_runner=self.runner_calling("bash", {}))
        result = await registry.execute(
            "task", {"description": "Refactor", "prompt": "Refactor everything", "subagent_type": "general"}, context
        )

        assert not result.success
        assert 'not "general"' in result.output

    @pytest.mark.asyncio
    async def test_subagent_allowlist(self, registry, broker, project_dir):
        context = make_context(
            broker, project_dir, Mode.AGENT,
            subagent_runner=self.runner_calling("bash", {"command": "ls"}),
        )
        result = await registry.execute(
            "task", {"description": "Look", "prompt": "Look around", "subagent_type": "explore"}, context
        )

        assert not result.success
        assert result.output.endswith('Tool "bash" is not allowed for explore subagent')

    @pytest.mark.asyncio
    async def test_general_subagent_asks(self, registry, project_dir):
        broker = make_broker("reject")
        context = make_context(broker, project_dir, Mode.AGENT, subagent_runner=self.runner_calling("bash", {}))
        result = await registry.execute(
            "task", {"description": "Build", "prompt": "Build it", "subagent_type": "general"}, context
        )

        assert not result.success
        assert result.output == "Permission denied by user"
        [asked] = broker.event_bus.of_type(PERMISSION_ASKED)
        assert asked.properties["permission"] == "task"

    @pytest.mark.asyncio
    async def test_no_runner(self, registry, broker, project_dir):
        context = make_context(broker, project_dir, Mode.AGENT)
        result = await registry.execute(
            "task", {"description": "Look", "prompt": "Look around", "subagent_type": "explore"}, context
        )

        assert not result.success
        assert result.output == "No subagent runner configured"


class TestSetMode:
    """Tests for the set_mode tool."""

    @pytest.mark.asyncio
    async def test_publishes_request(self, registry, project_dir):
        event_bus = RecordingEventBus()
        broker = PermissionBroker(event_bus)
        context = make_context(broker, project_dir, Mode.EXPLORE)

        result = await registry.execute("set_mode", {"mode": "AGENT", "reason": "need to edit"}, context)

        assert result.success
        [event] = event_bus.of_type(MODE_CHANGED)
        assert event.properties["from"] == "EXPLORE"
        assert event.properties["to"] == "AGENT"
        assert context.mode == Mode.EXPLORE

    @pytest.mark.asyncio
    async def test_invalid_mode(self, registry, broker, project_dir):
        context = make_context(broker, project_dir)
        result = await registry.execute("set_mode", {"mode": "YOLO"}, context)

        assert not result.success
        assert result.output.startswith("Invalid parameters: mode:")
