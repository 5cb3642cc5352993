# ABOUTME: Subprocess wrapper used by every external command call site
# ABOUTME: Converts missing executables, timeouts and OS errors into results instead of exceptions
import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND = "command not found"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of running an external command.

    ABOUTME: error is set when the process could not run or timed out
    ABOUTME: stdout/stderr are empty when output was not captured
    """
    args: tuple[str, ...]
    returncode: int | None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.returncode == 0

    @property
    def not_found(self) -> bool:
        return self.error is not None and self.error.startswith(COMMAND_NOT_FOUND)

    def describe_failure(self) -> str:
        """Short human-readable reason the command failed."""
        if self.error:
            return self.error
        detail = (self.stderr or self.stdout).strip()
        if detail:
            return f"exit code {self.returncode}: {detail[:200]}"
        return f"exit code {self.returncode}"


def run_command(
    args: list[str],
    timeout: float | None = None,
    cwd: Path | None = None,
    capture: bool = True,
) -> CommandResult:
    """Run a command and return its result without raising.

    ABOUTME: Uses shutil.which() so Windows .cmd shims (npm, claude) resolve
    ABOUTME: capture=False inherits the terminal for verbose output

    Args:
        args: Command and arguments, never passed through a shell
        timeout: Seconds before the process is killed
        cwd: Working directory for the command
        capture: Capture stdout/stderr as text

    Returns:
        CommandResult describing the outcome
    """
    executable = shutil.which(args[0])
    if executable is None:
        logger.debug(f"Executable not found on PATH: {args[0]}")
        return CommandResult(
            args=tuple(args),
            returncode=None,
            error=f"{COMMAND_NOT_FOUND}: {args[0]}",
        )

    logger.debug(f"Running: {' '.join(args)} (cwd={cwd}, timeout={timeout})")
    try:
        completed = subprocess.run(
            [executable, *args[1:]],
            cwd=str(cwd) if cwd else None,
            timeout=timeout,
            capture_output=capture,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except subprocess.TimeoutExpired:
        return CommandResult(
            args=tuple(args),
            returncode=None,
            error=f"timed out after {timeout} seconds",
        )
    except FileNotFoundError:
        return CommandResult(
            args=tuple(args),
            returncode=None,
            error=f"{COMMAND_NOT_FOUND}: {args[0]}",
        )
    except OSError as e:
        return CommandResult(args=tuple(args), returncode=None, error=f"OS error: {e}")

    result = CommandResult(
        args=tuple(args),
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
    logger.debug(f"Exit code {result.returncode} from {args[0]}")
    return result
