# Core data models for notion-mcp-setup
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

# ABOUTME: Exit codes
# 0 = success, 1 = failed step or check, 2 = config error, 3 = fatal
EXIT_SUCCESS = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_FATAL = 3


@dataclass(frozen=True)
class ServerEntry:
    """Immutable MCP server entry as written under ``mcpServers``.

    ABOUTME: Uses frozen dataclass to prevent accidental mutation
    ABOUTME: Mirrors the {command, args, env} shape host apps expect
    """
    command: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON shape stored in a host config."""
        return {
            "command": self.command,
            "args": list(self.args),
            "env": dict(self.env),
        }


@dataclass(frozen=True)
class ToolVersion:
    """Result of probing an external tool's version.

    ABOUTME: found=False means the tool is absent or unusable
    ABOUTME: satisfies_minimum is independent of found for too-old tools
    """
    name: str
    version_string: str | None
    found: bool
    satisfies_minimum: bool
    major: int | None = None


class RegistryStatus(Enum):
    """Status of a server in the Claude Code CLI registry."""
    NOT_FOUND = "not_found"
    CONNECTED = "connected"
    FAILED = "failed"
    UNKNOWN = "unknown"


Severity = Literal["ok", "info", "warning", "error"]


@dataclass(frozen=True)
class CheckMessage:
    """A single line of check output.

    ABOUTME: Severity 'error' is a hard failure, 'warning' is advisory
    ABOUTME: 'ok' and 'info' never affect the exit code
    """
    message: str
    severity: Severity


@dataclass
class CheckReport:
    """Accumulated outcome of one or more checks.

    ABOUTME: Every check returns its own report; callers merge them
    ABOUTME: Keeps messages in the order they were recorded
    """
    messages: list[CheckMessage] = field(default_factory=list)

    def ok(self, message: str) -> None:
        self.messages.append(CheckMessage(message=message, severity="ok"))

    def info(self, message: str) -> None:
        self.messages.append(CheckMessage(message=message, severity="info"))

    def warning(self, message: str) -> None:
        self.messages.append(CheckMessage(message=message, severity="warning"))

    def error(self, message: str) -> None:
        self.messages.append(CheckMessage(message=message, severity="error"))

    @property
    def errors(self) -> list[str]:
        return [m.message for m in self.messages if m.severity == "error"]

    @property
    def warnings(self) -> list[str]:
        return [m.message for m in self.messages if m.severity == "warning"]

    @property
    def passed(self) -> list[str]:
        return [m.message for m in self.messages if m.severity == "ok"]

    @property
    def has_errors(self) -> bool:
        return any(m.severity == "error" for m in self.messages)

    def merge(self, other: "CheckReport") -> "CheckReport":
        """Return a new report combining this one with ``other``.

        ABOUTME: Doesn't mutate either input
        """
        return CheckReport(messages=self.messages + other.messages)
