"""Tests for operating modes and the mode gate."""

import pytest

from agent.modes import (
    Mode,
    ModeGate,
    ModeState,
    VisibilityClass,
    validate_write_path,
)
from core.exceptions import ModeRestrictionError

ALWAYS = VisibilityClass.ALWAYS
READ_ONLY = VisibilityClass.READ_ONLY
GATED = VisibilityClass.GATED


class TestToolVisibility:
    """Tests for ModeGate.is_tool_visible()."""

    @pytest.mark.parametrize("mode", [Mode.AUTO, Mode.AGENT, Mode.DEBUG])
    def test_unrestricted_modes_expose_everything(self, mode):
        gate = ModeGate()
        assert gate.is_tool_visible(mode, "bash", GATED)
        assert gate.is_tool_visible(mode, "file_edit", GATED)
        assert gate.is_tool_visible(mode, "custom_tool", None)

    def test_explore_is_read_only(self):
        gate = ModeGate()
        assert gate.is_tool_visible(Mode.EXPLORE, "file_read", READ_ONLY)
        assert gate.is_tool_visible(Mode.EXPLORE, "set_mode", ALWAYS)
        assert not gate.is_tool_visible(Mode.EXPLORE, "file_write", GATED)
        assert not gate.is_tool_visible(Mode.EXPLORE, "bash", GATED)
        assert not gate.is_tool_visible(Mode.EXPLORE, "task", GATED)

    @pytest.mark.parametrize("mode", [Mode.PLANNER, Mode.PLAN_PRD])
    def test_planning_modes(self, mode):
        """Planning modes add file_write and task but never bash or file_edit."""
        gate = ModeGate()
        assert gate.is_tool_visible(mode, "grep", READ_ONLY)
        assert gate.is_tool_visible(mode, "file_write", GATED)
        assert gate.is_tool_visible(mode, "task", GATED)
        assert not gate.is_tool_visible(mode, "bash", GATED)
        assert not gate.is_tool_visible(mode, "file_edit", GATED)

    def test_deny_wins_over_class(self):
        """A denied tool stays hidden whatever class it is given."""
        gate = ModeGate()
        assert not gate.is_tool_visible(Mode.PLANNER, "bash", READ_ONLY)
        assert not gate.is_tool_visible(Mode.EXPLORE, "file_edit", ALWAYS)

    @pytest.mark.parametrize("mode", [Mode.EXPLORE, Mode.PLANNER, Mode.PLAN_PRD])
    def test_unclassified_hidden_in_restrictive_modes(self, mode):
        assert not ModeGate().is_tool_visible(mode, "custom_tool", None)

    def test_mode_by_value(self):
        assert ModeGate().is_tool_visible("PLAN-PRD", "file_write", GATED)

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            ModeGate().is_tool_visible("YOLO", "bash", GATED)


class TestWritePaths:
    """Tests for validate_write_path()."""

    def test_unrestricted_modes_allow_any_path(self):
        assert validate_write_path(Mode.AGENT, "/project/src/app.py", "/project") is None
        assert validate_write_path(Mode.AUTO, "/project/README.md", "/project") is None

    def test_explore_denies_all_writes(self):
        error = validate_write_path(Mode.EXPLORE, "/project/docs/notes.md", "/project")
        assert error == "EXPLORE mode is read-only. Switch to AGENT mode to write files."

    def test_planner_allows_docs(self):
        assert validate_write_path(Mode.PLANNER, "/project/docs/plan.md", "/project") is None
        assert validate_write_path(Mode.PLANNER, "/project/docs/design/api.md", "/project") is None

    def test_planner_denies_outside_docs(self):
        error = validate_write_path(Mode.PLANNER, "/project/src/app.py", "/project")
        assert error == (
            "PLANNER mode can only write to docs/. Requested path: /project/src/app.py. "
            "Switch to AGENT mode to write elsewhere."
        )

    def test_planner_docs_prefix_is_a_directory(self):
        """docs-old/ is not docs/."""
        assert validate_write_path(Mode.PLANNER, "/project/docs-old/plan.md", "/project") is not None

    def test_planner_docs_is_relative_to_project(self):
        """A docs directory elsewhere in the tree does not count."""
        assert validate_write_path(Mode.PLANNER, "/project/src/docs/plan.md", "/project") is not None

    def test_planner_is_case_insensitive(self):
        assert validate_write_path(Mode.PLANNER, "/project/Docs/Plan.md", "/project") is None

    def test_plan_prd_allows_prd_anywhere(self):
        assert validate_write_path(Mode.PLAN_PRD, "/project/PRD.md", "/project") is None
        assert validate_write_path(Mode.PLAN_PRD, "/project/docs/prd.md", "/project") is None
        assert validate_write_path(Mode.PLAN_PRD, "C:\\work\\PRD.MD", "C:\\work") is None

    def test_plan_prd_denies_other_files(self):
        error = validate_write_path(Mode.PLAN_PRD, "/project/docs/plan.md", "/project")
        assert error.startswith("PLAN-PRD mode can only write PRD.md.")
        assert validate_write_path(Mode.PLAN_PRD, "/project/PRD.md.bak", "/project") is not None

    def test_custom_targets(self):
        gate = ModeGate(docs_dir="design", single_file="BRIEF.md")
        assert gate.validate_write_path(Mode.PLANNER, "/project/design/a.md", "/project") is None
        assert gate.validate_write_path(Mode.PLANNER, "/project/docs/a.md", "/project") is not None
        assert gate.validate_write_path(Mode.PLAN_PRD, "/project/BRIEF.md", "/project") is None

    def test_check_write_path_raises(self):
        with pytest.raises(ModeRestrictionError) as exc_info:
            ModeGate().check_write_path(Mode.EXPLORE, "/project/a.py", "/project")
        assert exc_info.value.mode == "EXPLORE"

    def test_can_write_files(self):
        gate = ModeGate()
        assert gate.can_write_files(Mode.AGENT)
        assert not gate.can_write_files(Mode.PLANNER)
        assert not gate.can_write_files(Mode.EXPLORE)


class TestSubagents:
    """Tests for subagent restrictions."""

    def test_unrestricted_modes_launch_any(self):
        ModeGate().check_subagent(Mode.AGENT, "general")

    def test_planner_only_launches_explore(self):
        gate = ModeGate()
        gate.check_subagent(Mode.PLANNER, "explore")

        with pytest.raises(ModeRestrictionError, match='not "general"'):
            gate.check_subagent(Mode.PLANNER, "general")


class TestModeState:
    """Tests for the orchestrator's mode holder."""

    def test_default_is_auto(self):
        assert ModeState().get_current_mode() == Mode.AUTO

    def test_set_returns_previous(self):
        state = ModeState()
        assert state.set_current_mode("PLANNER") == Mode.AUTO
        assert state.get_current_mode() == Mode.PLANNER
