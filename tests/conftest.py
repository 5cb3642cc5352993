# ABOUTME: Shared fixtures: a fake subprocess runner and a scratch project checkout
# ABOUTME: The fake runner replaces run_command in every module that shells out
from pathlib import Path
from typing import Callable

import pytest

from notion_mcp_setup.config import ProjectPaths
from notion_mcp_setup.utils.process import CommandResult

NODE_VERSION = "v20.11.1"
NPM_VERSION = "10.2.4"
HELP_TEXT = "Usage: notion-mcp-server [options]\n"


class FakeRunner:
    """Stand-in for run_command keyed on argument prefixes.

    The longest matching prefix wins; unmatched commands succeed silently.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self._responses: dict[tuple[str, ...], dict] = {}

    def set(
        self,
        *prefix: str,
        returncode: int | None = 0,
        stdout: str = "",
        stderr: str = "",
        error: str | None = None,
        side_effect: Callable[[], None] | None = None,
    ) -> None:
        self._responses[prefix] = {
            "returncode": returncode,
            "stdout": stdout,
            "stderr": stderr,
            "error": error,
            "side_effect": side_effect,
        }

    def missing(self, *prefix: str) -> None:
        """Make every command under prefix look not installed."""
        for key in [k for k in self._responses if k[: len(prefix)] == prefix]:
            del self._responses[key]
        self.set(*prefix, returncode=None, error=f"command not found: {prefix[0]}")

    def __call__(self, args, timeout=None, cwd=None, capture=True) -> CommandResult:
        self.calls.append(list(args))
        for prefix in sorted(self._responses, key=len, reverse=True):
            if tuple(args[: len(prefix)]) == prefix:
                response = dict(self._responses[prefix])
                side_effect = response.pop("side_effect")
                if side_effect:
                    side_effect()
                return CommandResult(args=tuple(args), **response)
        return CommandResult(args=tuple(args), returncode=0)

    def called(self, *prefix: str) -> bool:
        return any(tuple(call[: len(prefix)]) == prefix for call in self.calls)


@pytest.fixture
def fake_runner(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    """Patch run_command everywhere with a healthy-system FakeRunner."""
    runner = FakeRunner()
    runner.set("node", "--version", stdout=f"{NODE_VERSION}\n")
    runner.set("npm", "--version", stdout=f"{NPM_VERSION}\n")
    runner.set("claude", "--version", stdout="1.0.0 (Claude Code)\n")
    for module in (
        "notion_mcp_setup.dependencies",
        "notion_mcp_setup.registry",
        "notion_mcp_setup.checks",
        "notion_mcp_setup.installer",
    ):
        monkeypatch.setattr(f"{module}.run_command", runner)
    return runner


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "notion-mcp-server"
    root.mkdir()
    return root


@pytest.fixture
def paths(project_root: Path, tmp_path: Path) -> ProjectPaths:
    desktop_config = tmp_path / "home" / ".config" / "claude" / "claude_desktop_config.json"
    return ProjectPaths.from_root(project_root, desktop_config=desktop_config)


@pytest.fixture
def built_paths(paths: ProjectPaths) -> ProjectPaths:
    """A checkout that already has node_modules and bin/cli.mjs."""
    paths.node_modules.mkdir()
    paths.cli_artifact.parent.mkdir(parents=True)
    paths.cli_artifact.write_text("#!/usr/bin/env node\n")
    return paths
