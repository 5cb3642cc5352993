# ABOUTME: Read-only checks shared by the installer and verifier
# ABOUTME: Each check returns its own CheckReport; nothing here mutates state
import os
from pathlib import Path

from notion_mcp_setup.config import SERVER_NAME, TOKEN_ENV_VAR, ProjectPaths
from notion_mcp_setup.models import CheckReport, RegistryStatus
from notion_mcp_setup.reconcile import MCP_SERVERS_KEY, read_host_config
from notion_mcp_setup.registry import ClaudeCodeRegistry
from notion_mcp_setup.utils.backup import list_backups
from notion_mcp_setup.utils.process import run_command

# ABOUTME: Text the built CLI prints for --help
EXPECTED_HELP_TEXT = "Usage: notion-mcp-server"

NOTION_SETUP_INSTRUCTIONS = [
    "Notion Integration Setup Instructions:",
    "1. Go to https://www.notion.so/profile/integrations",
    "2. Create a new internal integration or select an existing one",
    '3. Copy the integration token (starts with "ntn_")',
    "4. Add the token to your Claude configurations",
    "5. Grant page access to your integration in Notion",
]


def smoke_test_cli(cli_artifact: Path, timeout: float) -> str | None:
    """Run the built CLI with --help.

    Returns None on success, otherwise a failure message.
    """
    result = run_command(["node", str(cli_artifact), "--help"], timeout=timeout)
    if not result.ok:
        return f"CLI binary test failed: {result.describe_failure()}"
    if EXPECTED_HELP_TEXT not in result.stdout:
        return "CLI binary test failed - unexpected output"
    return None


def check_project_build(paths: ProjectPaths, smoke_timeout: float = 10) -> CheckReport:
    """Check dependency marker, build artifact, and that the artifact runs.

    ABOUTME: Reports the command to run instead of running it
    """
    report = CheckReport()

    if not paths.node_modules.is_dir():
        report.error('Node modules not found - run "npm install"')
        return report
    report.ok("Node modules found")

    if not paths.cli_artifact.is_file():
        report.error('CLI binary not found - run "npm run build"')
        return report
    report.ok("CLI binary found")

    failure = smoke_test_cli(paths.cli_artifact, timeout=smoke_timeout)
    if failure:
        report.error(failure)
    else:
        report.ok("CLI binary is functional")

    return report


def _load_desktop_entry(path: Path) -> tuple[dict | None, str | None]:
    """Return (notion entry dict, problem) from the desktop config."""
    config = read_host_config(path)
    servers = config.get(MCP_SERVERS_KEY)
    if not servers:
        return None, "No MCP servers configured in Claude Desktop"
    entry = servers.get(SERVER_NAME)
    if not isinstance(entry, dict):
        return None, "Notion MCP server not found in Claude Desktop config"
    return entry, None


def check_desktop_config(paths: ProjectPaths) -> CheckReport:
    """Check the Claude Desktop entry points at this checkout's CLI.

    A missing file or entry is a warning; an unparseable file is an error.
    """
    report = CheckReport()
    config_path = paths.desktop_config

    if not config_path.exists():
        report.warning("Claude Desktop config file not found")
        return report

    try:
        entry, problem = _load_desktop_entry(config_path)
    except (OSError, ValueError) as e:
        report.error(f"Failed to parse Claude Desktop config: {e}")
        return report

    if entry is None:
        report.warning(problem or "Notion MCP server not found in Claude Desktop config")
        return report

    if entry.get("command") != "node":
        report.warning('Claude Desktop config command should be "node"')

    args = entry.get("args")
    if not isinstance(args, list) or str(paths.cli_artifact) not in args:
        report.warning("Claude Desktop config args do not point to correct CLI binary")

    env = entry.get("env")
    if not isinstance(env, dict) or TOKEN_ENV_VAR not in env:
        report.warning(
            f"{TOKEN_ENV_VAR} not configured in Claude Desktop (may need to be set manually)"
        )

    if not report.warnings:
        report.ok("Claude Desktop configuration looks correct")

    return report


def check_claude_code_cli(registry: ClaudeCodeRegistry) -> CheckReport:
    """Check the server is registered and connected in the Claude Code CLI."""
    report = CheckReport()

    if not registry.is_available():
        report.warning("Claude Code CLI not found - cannot verify MCP configuration")
        return report

    try:
        status = registry.status(SERVER_NAME)
    except RuntimeError as e:
        report.error(f"Failed to check Claude Code CLI MCP servers: {e}")
        return report

    if status is RegistryStatus.CONNECTED:
        report.ok("Notion MCP server is connected in Claude Code CLI")
    elif status is RegistryStatus.FAILED:
        report.warning("Notion MCP server found but failed to connect in Claude Code CLI")
    elif status is RegistryStatus.UNKNOWN:
        report.warning("Notion MCP server found with unknown status in Claude Code CLI")
    else:
        report.warning("Notion MCP server not found in Claude Code CLI configuration")

    return report


def check_notion_integration(paths: ProjectPaths) -> CheckReport:
    """Check that a Notion token is available somewhere.

    ABOUTME: Parse problems are reported by check_desktop_config, not here
    """
    report = CheckReport()

    if os.environ.get(TOKEN_ENV_VAR):
        report.ok(f"{TOKEN_ENV_VAR} found in environment")
    else:
        report.warning(
            f"{TOKEN_ENV_VAR} not set in environment - will need to be configured in Claude configs"
        )

    if paths.desktop_config.exists():
        try:
            entry, _problem = _load_desktop_entry(paths.desktop_config)
        except (OSError, ValueError):
            entry = None

        if entry is not None and isinstance(entry.get("env"), dict) and TOKEN_ENV_VAR in entry["env"]:
            if entry["env"][TOKEN_ENV_VAR]:
                report.ok(f"{TOKEN_ENV_VAR} configured in Claude Desktop")
            else:
                report.warning(f"{TOKEN_ENV_VAR} is empty in Claude Desktop config")

    for line in NOTION_SETUP_INSTRUCTIONS:
        report.info(line)

    return report


def check_backups(paths: ProjectPaths) -> CheckReport:
    """Report how many desktop config backups exist."""
    report = CheckReport()
    backups = list_backups(paths.desktop_config)
    if backups:
        report.info(f"{len(backups)} backup(s) of Claude Desktop config, newest: {backups[0].name}")
    else:
        report.info("No Claude Desktop config backups found")
    return report

