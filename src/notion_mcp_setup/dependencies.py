# ABOUTME: Runtime and package manager version checks
# ABOUTME: Distinguishes a missing tool from one that is present but too old
import re

from notion_mcp_setup.models import CheckReport, ToolVersion
from notion_mcp_setup.utils.process import run_command

RUNTIME = "node"
PACKAGE_MANAGER = "npm"

# ABOUTME: Oldest Node.js major version the server supports
MIN_NODE_MAJOR = 16

VERSION_TIMEOUT = 10  # seconds

_MAJOR_PATTERN = re.compile(r"^\s*v?(\d+)")


def parse_major_version(version_string: str) -> int | None:
    """Extract the leading major version number.

    Examples:
        >>> parse_major_version("v18.17.0")
        18
        >>> parse_major_version("9.6.7")
        9
        >>> parse_major_version("nightly") is None
        True
    """
    match = _MAJOR_PATTERN.match(version_string)
    return int(match.group(1)) if match else None


def check_tool_version(
    name: str,
    min_major: int | None = None,
    timeout: float = VERSION_TIMEOUT,
) -> ToolVersion:
    """Query ``<name> --version`` and classify the result.

    ABOUTME: found=False when the command is missing, times out or exits non-zero
    ABOUTME: The version string is reported verbatim, even when too old
    ABOUTME: An unparseable version never satisfies a minimum

    Args:
        name: Executable to query
        min_major: Minimum major version, or None for no requirement
        timeout: Seconds before giving up on the query

    Returns:
        ToolVersion describing the tool
    """
    result = run_command([name, "--version"], timeout=timeout)
    if not result.ok:
        return ToolVersion(name=name, version_string=None, found=False, satisfies_minimum=False)

    version_string = result.stdout.strip()
    major = parse_major_version(version_string)

    if min_major is None:
        satisfies = True
    else:
        satisfies = major is not None and major >= min_major

    return ToolVersion(
        name=name,
        version_string=version_string,
        found=True,
        satisfies_minimum=satisfies,
        major=major,
    )


def check_system_dependencies() -> CheckReport:
    """Check Node.js and npm.

    Missing tools and a Node.js older than MIN_NODE_MAJOR are errors.
    """
    report = CheckReport()

    node = check_tool_version(RUNTIME, min_major=MIN_NODE_MAJOR)
    if not node.found:
        report.error("Node.js is not installed or not in PATH")
    else:
        report.ok(f"Node.js version: {node.version_string}")
        if not node.satisfies_minimum:
            report.error(
                f"Node.js version {MIN_NODE_MAJOR} or higher is required "
                f"(found {node.version_string})"
            )

    npm = check_tool_version(PACKAGE_MANAGER)
    if not npm.found:
        report.error("npm is not installed or not in PATH")
    else:
        report.ok(f"npm version: {npm.version_string}")

    return report
