# ABOUTME: Adapter for the Claude Code CLI's MCP server registry (`claude mcp ...`)
# ABOUTME: The registry is opaque; it is only touched through the CLI's own commands
import logging
import re
import shlex
from dataclasses import dataclass

from notion_mcp_setup.models import RegistryStatus
from notion_mcp_setup.utils.process import CommandResult, run_command

logger = logging.getLogger(__name__)

CLAUDE_EXECUTABLE = "claude"
DEFAULT_SCOPE = "user"
REGISTRY_TIMEOUT = 30  # seconds

# ABOUTME: Status markers printed by `claude mcp list` next to each server
CONNECTED_MARKER = "✓ Connected"
FAILED_MARKER = "✗ Failed to connect"


def parse_server_status(output: str, name: str) -> RegistryStatus:
    """Classify a server's status from `claude mcp list` output.

    ABOUTME: Only the line naming the server is inspected
    ABOUTME: Name must match as a whole token, so 'notion-mcp-dev' != 'notion-mcp'

    Args:
        output: Captured stdout of `claude mcp list`
        name: Server name to look for

    Returns:
        RegistryStatus for the server

    Examples:
        >>> parse_server_status("notion-mcp: node cli.mjs - ✓ Connected", "notion-mcp")
        <RegistryStatus.CONNECTED: 'connected'>
    """
    token = re.compile(rf"(?<![\w-]){re.escape(name)}(?![\w-])")

    for line in output.splitlines():
        if not token.search(line):
            continue
        if CONNECTED_MARKER in line:
            return RegistryStatus.CONNECTED
        if FAILED_MARKER in line:
            return RegistryStatus.FAILED
        return RegistryStatus.UNKNOWN

    return RegistryStatus.NOT_FOUND


@dataclass(frozen=True)
class RegistrationOutcome:
    """Result of registering a server with the Claude Code CLI.

    ABOUTME: success covers both a fresh add and an already-present entry
    ABOUTME: manual_command is what the operator should run on failure
    """
    success: bool
    already_present: bool = False
    detail: str = ""
    manual_command: str = ""


class ClaudeCodeRegistry:
    """Adapter for the Claude Code CLI server registry.

    ABOUTME: Every call is bounded by timeout and never raises for process failures
    """

    def __init__(
        self,
        executable: str = CLAUDE_EXECUTABLE,
        scope: str = DEFAULT_SCOPE,
        timeout: float = REGISTRY_TIMEOUT,
        verbose: bool = False,
    ) -> None:
        self.executable = executable
        self.scope = scope
        self.timeout = timeout
        self.verbose = verbose

    def is_available(self) -> bool:
        """Return True if the CLI responds to --version."""
        return run_command([self.executable, "--version"], timeout=self.timeout).ok

    def list_servers(self) -> CommandResult:
        return run_command([self.executable, "mcp", "list"], timeout=self.timeout)

    def status(self, name: str) -> RegistryStatus:
        """Look up a server's status.

        Raises:
            RuntimeError: If `claude mcp list` fails
        """
        result = self.list_servers()
        if not result.ok:
            raise RuntimeError(result.describe_failure())
        return parse_server_status(result.stdout, name)

    def remove(self, name: str) -> bool:
        """Remove a server entry, returning False if removal failed.

        ABOUTME: Failure is expected when the entry doesn't exist yet
        """
        result = run_command(
            [self.executable, "mcp", "remove", name, "-s", self.scope],
            timeout=self.timeout,
        )
        if not result.ok:
            logger.debug(f"Remove of '{name}' failed (likely absent): {result.describe_failure()}")
        return result.ok

    def add_command(
        self,
        name: str,
        command: str,
        args: list[str],
        env: dict[str, str] | None = None,
    ) -> list[str]:
        """Build the `claude mcp add` argument list."""
        cmd = [self.executable, "mcp", "add", name, "-s", self.scope]
        for key, value in (env or {}).items():
            cmd += ["--env", f"{key}={value}"]
        cmd += ["--", command, *args]
        return cmd

    def add(
        self,
        name: str,
        command: str,
        args: list[str],
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        return run_command(
            self.add_command(name, command, args, env),
            timeout=self.timeout,
            capture=not self.verbose,
        )

    def register(
        self,
        name: str,
        command: str,
        args: list[str],
        env: dict[str, str] | None = None,
    ) -> RegistrationOutcome:
        """Idempotently (re-)register a server.

        Removes any existing entry first so a reinstall picks up new args,
        then adds it. If the add fails, the registry is queried: an entry
        that is listed afterwards counts as already configured.

        Args:
            name: Server name
            command: Runtime command, e.g. "node"
            args: Arguments, e.g. the absolute script path
            env: Optional environment variables for the server

        Returns:
            RegistrationOutcome, never raises for CLI failures
        """
        removed = self.remove(name)
        result = self.add(name, command, args, env)
        if result.ok:
            return RegistrationOutcome(success=True, detail="replaced" if removed else "added")

        try:
            present = self.status(name) is not RegistryStatus.NOT_FOUND
        except RuntimeError as e:
            logger.debug(f"Could not query registry after failed add: {e}")
            present = False

        if present:
            return RegistrationOutcome(success=True, already_present=True)

        # Token is left out of the suggested command
        manual = shlex.join(self.add_command(name, command, args))
        return RegistrationOutcome(
            success=False,
            detail=result.describe_failure(),
            manual_command=manual,
        )
