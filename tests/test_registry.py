# ABOUTME: Tests for the Claude Code CLI registry adapter
# ABOUTME: Includes captured `claude mcp list` output samples for the status parser
import pytest

from notion_mcp_setup.models import RegistryStatus
from notion_mcp_setup.registry import ClaudeCodeRegistry, parse_server_status

LIST_CONNECTED = """Checking MCP server health...

github: npx -y @modelcontextprotocol/server-github - ✗ Failed to connect
notion-mcp: node /home/dev/notion-mcp-server/bin/cli.mjs - ✓ Connected
"""

LIST_FAILED = """Checking MCP server health...

notion-mcp: node /home/dev/notion-mcp-server/bin/cli.mjs - ✗ Failed to connect
github: npx -y @modelcontextprotocol/server-github - ✓ Connected
"""

LIST_UNKNOWN = """notion-mcp: node /home/dev/notion-mcp-server/bin/cli.mjs
"""

LIST_OTHER_ONLY = """Checking MCP server health...

notion-mcp-dev: node /tmp/dev/bin/cli.mjs - ✓ Connected
filesystem: npx -y @modelcontextprotocol/server-filesystem /projects - ✓ Connected
"""

LIST_EMPTY = "No MCP servers configured. Use `claude mcp add` to add a server.\n"


class TestParseServerStatus:
    """Tests for parse_server_status function."""

    def test_connected(self) -> None:
        assert parse_server_status(LIST_CONNECTED, "notion-mcp") is RegistryStatus.CONNECTED

    def test_failed(self) -> None:
        """Test that another server's status doesn't leak into ours."""
        assert parse_server_status(LIST_FAILED, "notion-mcp") is RegistryStatus.FAILED

    def test_unknown(self) -> None:
        assert parse_server_status(LIST_UNKNOWN, "notion-mcp") is RegistryStatus.UNKNOWN

    def test_similar_name_not_matched(self) -> None:
        assert parse_server_status(LIST_OTHER_ONLY, "notion-mcp") is RegistryStatus.NOT_FOUND

    def test_empty_registry(self) -> None:
        assert parse_server_status(LIST_EMPTY, "notion-mcp") is RegistryStatus.NOT_FOUND

    def test_other_server_lookup(self) -> None:
        assert parse_server_status(LIST_CONNECTED, "github") is RegistryStatus.FAILED


class TestClaudeCodeRegistry:
    """Tests for ClaudeCodeRegistry commands."""

    def test_add_command_shape(self) -> None:
        registry = ClaudeCodeRegistry()
        cmd = registry.add_command(
            "notion-mcp", "node", ["/x/bin/cli.mjs"], {"NOTION_TOKEN": "ntn_1"}
        )
        assert cmd == [
            "claude", "mcp", "add", "notion-mcp", "-s", "user",
            "--env", "NOTION_TOKEN=ntn_1",
            "--", "node", "/x/bin/cli.mjs",
        ]

    def test_add_command_without_env(self) -> None:
        cmd = ClaudeCodeRegistry().add_command("notion-mcp", "node", ["/x/bin/cli.mjs"])
        assert "--env" not in cmd

    def test_remove_failure_swallowed(self, fake_runner) -> None:
        fake_runner.set("claude", "mcp", "remove", returncode=1, stderr="No MCP server found")
        assert ClaudeCodeRegistry().remove("notion-mcp") is False

    def test_remove_success(self, fake_runner) -> None:
        assert ClaudeCodeRegistry().remove("notion-mcp") is True
        assert fake_runner.called("claude", "mcp", "remove", "notion-mcp", "-s", "user")

    def test_status_raises_when_list_fails(self, fake_runner) -> None:
        fake_runner.set("claude", "mcp", "list", returncode=None, error="timed out after 30 seconds")
        with pytest.raises(RuntimeError, match="timed out"):
            ClaudeCodeRegistry().status("notion-mcp")

    def test_is_available(self, fake_runner) -> None:
        assert ClaudeCodeRegistry().is_available() is True
        fake_runner.missing("claude")
        assert ClaudeCodeRegistry().is_available() is False


class TestRegister:
    """Tests for ClaudeCodeRegistry.register."""

    def test_removes_before_add(self, fake_runner) -> None:
        outcome = ClaudeCodeRegistry().register("notion-mcp", "node", ["/x/bin/cli.mjs"])

        assert outcome.success is True
        assert outcome.already_present is False
        verbs = [call[2] for call in fake_runner.calls if call[:2] == ["claude", "mcp"]]
        assert verbs == ["remove", "add"]

    def test_fresh_install_when_remove_fails(self, fake_runner) -> None:
        fake_runner.set("claude", "mcp", "remove", returncode=1)

        outcome = ClaudeCodeRegistry().register("notion-mcp", "node", ["/x/bin/cli.mjs"])

        assert outcome.success is True
        assert outcome.detail == "added"

    def test_failed_add_but_listed_counts_as_present(self, fake_runner) -> None:
        """Test the explicit query after a failed add."""
        fake_runner.set("claude", "mcp", "add", returncode=1, stderr="some error")
        fake_runner.set("claude", "mcp", "list", stdout=LIST_CONNECTED)

        outcome = ClaudeCodeRegistry().register("notion-mcp", "node", ["/x/bin/cli.mjs"])

        assert outcome.success is True
        assert outcome.already_present is True

    def test_failed_add_reports_manual_command(self, fake_runner) -> None:
        fake_runner.set("claude", "mcp", "add", returncode=1, stderr="permission denied")
        fake_runner.set("claude", "mcp", "list", stdout=LIST_EMPTY)

        outcome = ClaudeCodeRegistry().register(
            "notion-mcp", "node", ["/x/bin/cli.mjs"], {"NOTION_TOKEN": "ntn_secret"}
        )

        assert outcome.success is False
        assert "permission denied" in outcome.detail
        assert "claude mcp add notion-mcp" in outcome.manual_command
        assert "ntn_secret" not in outcome.manual_command

    def test_missing_cli_never_raises(self, fake_runner) -> None:
        fake_runner.missing("claude")

        outcome = ClaudeCodeRegistry().register("notion-mcp", "node", ["/x/bin/cli.mjs"])

        assert outcome.success is False
        assert "command not found" in outcome.detail
