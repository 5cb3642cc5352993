# Configuration loading and path resolution for notion-mcp-setup
import json
import platform
from dataclasses import dataclass
from pathlib import Path

# ABOUTME: Fixed identifier of the server entry this tool manages
SERVER_NAME = "notion-mcp"

# ABOUTME: Env var the MCP server reads its Notion integration token from
TOKEN_ENV_VAR = "NOTION_TOKEN"

# ABOUTME: Host config filename inside the Claude Desktop config directory
DESKTOP_CONFIG_FILENAME = "claude_desktop_config.json"

# ABOUTME: Project-relative locations of the dependency marker and build artifact
NODE_MODULES_DIR = "node_modules"
CLI_ARTIFACT = Path("bin") / "cli.mjs"

# ABOUTME: Default optional settings file, relative to the project root
DEFAULT_SETTINGS_FILE = Path("scripts") / "install-config.json"

# ABOUTME: Claude Desktop config directory per OS family, relative to home
DESKTOP_CONFIG_DIRS: dict[str, tuple[str, ...]] = {
    "Windows": ("AppData", "Roaming", "Claude"),
    "Darwin": ("Library", "Application Support", "Claude"),
    "Linux": (".config", "claude"),
}


class UnsupportedPlatformError(RuntimeError):
    """Raised when no Claude Desktop config location is known for this OS."""


@dataclass(frozen=True)
class InstallSettings:
    """Settings loaded from the optional install-config.json.

    ABOUTME: Defaults apply when the file is absent
    ABOUTME: source is the file the values came from, if any
    """
    notion_token: str = ""
    verbose: bool = False
    source: Path | None = None


@dataclass(frozen=True)
class ProjectPaths:
    """Filesystem locations the installer and verifier work against.

    ABOUTME: project_root is the Notion MCP server checkout
    ABOUTME: desktop_config is the Claude Desktop host config file
    """
    project_root: Path
    node_modules: Path
    cli_artifact: Path
    desktop_config: Path

    @classmethod
    def from_root(cls, project_root: Path, desktop_config: Path | None = None) -> "ProjectPaths":
        """Build paths for a checkout.

        ABOUTME: Resolves project_root so the CLI artifact path is absolute
        ABOUTME: Falls back to the OS default desktop config location
        """
        root = project_root.expanduser().resolve()
        return cls(
            project_root=root,
            node_modules=root / NODE_MODULES_DIR,
            cli_artifact=root / CLI_ARTIFACT,
            desktop_config=desktop_config if desktop_config else get_desktop_config_path(),
        )


def get_desktop_config_dir(system: str | None = None) -> Path:
    """Return the Claude Desktop config directory for an OS family.

    ABOUTME: Uses platform.system() when system isn't given
    ABOUTME: Directory may not exist yet

    Args:
        system: OS family name as returned by platform.system()

    Returns:
        Path to the config directory

    Raises:
        UnsupportedPlatformError: If the OS family has no known location
    """
    system = system or platform.system()
    parts = DESKTOP_CONFIG_DIRS.get(system)
    if parts is None:
        raise UnsupportedPlatformError(f"Unsupported platform: {system}")
    return Path.home().joinpath(*parts)


def get_desktop_config_path(system: str | None = None) -> Path:
    """Return the Claude Desktop config file path for an OS family."""
    return get_desktop_config_dir(system) / DESKTOP_CONFIG_FILENAME


def load_settings(path: Path | None, project_root: Path) -> InstallSettings:
    """Load installer settings from JSON.

    ABOUTME: Absence is not an error - defaults apply
    ABOUTME: Fail-fast on parse errors with clear error messages

    Args:
        path: Explicit settings file, or None for the project default
        project_root: Checkout root used to locate the default file

    Returns:
        Parsed InstallSettings

    Raises:
        ValueError: If the file exists but isn't a valid settings object
    """
    settings_path = path if path else project_root / DEFAULT_SETTINGS_FILE

    if not settings_path.exists():
        return InstallSettings()

    try:
        with settings_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ValueError(f"Failed to read configuration file {settings_path}: {e}") from e
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError
        raise ValueError(f"Failed to parse configuration file {settings_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {settings_path} must contain a JSON object")

    token = data.get("notionToken") or ""
    if not isinstance(token, str):
        raise ValueError("'notionToken' must be a string")

    verbose = data.get("verbose")
    if verbose is None:
        verbose = False
    if not isinstance(verbose, bool):
        raise ValueError("'verbose' must be true or false")

    return InstallSettings(
        notion_token=token,
        verbose=verbose,
        source=settings_path,
    )
