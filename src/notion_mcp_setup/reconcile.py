# ABOUTME: Read-merge-write reconciliation of one server entry in a host config file
# ABOUTME: Preserves unrelated keys and backs up parseable prior content before writing
import json
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, cast

from notion_mcp_setup.models import ServerEntry
from notion_mcp_setup.utils.backup import create_backup

logger = logging.getLogger(__name__)

MCP_SERVERS_KEY = "mcpServers"


class ReconcileError(Exception):
    """Base class for reconciliation failures."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class DirectoryCreateError(ReconcileError):
    """The parent directory of the config file could not be created."""


class ConfigWriteError(ReconcileError):
    """The config file could not be written."""


@dataclass
class ReconcileResult:
    """Outcome of a successful reconcile() call.

    ABOUTME: backup_path is None when there was no parseable prior document
    ABOUTME: warnings are recoverable problems, e.g. a corrupt prior file
    """
    path: Path
    backup_path: Path | None = None
    recovered_from_corrupt: bool = False
    warnings: list[str] = field(default_factory=list)


def load_json_document(path: Path) -> Any:
    """Parse a JSON file without checking its shape.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the bytes aren't valid UTF-8 JSON
    """
    with open(path, encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e


def read_host_config(path: Path) -> dict[str, Any]:
    """Read and validate a host config document.

    ABOUTME: Raises ValueError for invalid JSON or unexpected structure
    ABOUTME: Used read-only by the verifier

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If content isn't a JSON object with an object mcpServers
    """
    data = load_json_document(path)

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object at top level of {path}")

    servers = data.get(MCP_SERVERS_KEY)
    if servers is not None and not isinstance(servers, dict):
        raise ValueError(f"'{MCP_SERVERS_KEY}' in {path} must be an object")

    return cast(dict[str, Any], data)


def write_host_config(path: Path, data: dict[str, Any]) -> None:
    """Write a host config via a temporary sibling and rename.

    ABOUTME: Uses 2-space indentation and a trailing newline
    ABOUTME: Key order is kept as read so diffs stay minimal
    ABOUTME: An existing file's permission bits carry over to the new file
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def reconcile(path: Path, server_name: str, entry: ServerEntry) -> ReconcileResult:
    """Ensure ``mcpServers[server_name]`` equals ``entry`` in the file at ``path``.

    Every other top-level key and every other server entry is carried over
    unchanged. When the file holds parseable JSON it is copied to
    ``<name>.backup.<epoch_ms>`` first, even if the write changes nothing
    or the document has the wrong shape. Only a file that can't be parsed
    at all is replaced without a backup, with a warning on the result.

    Args:
        path: Absolute path of the host config file
        server_name: Key to set under mcpServers
        entry: Desired server entry (replaces any existing one)

    Returns:
        ReconcileResult describing what was written

    Raises:
        ValueError: If arguments are invalid
        DirectoryCreateError: If the parent directory can't be created
        ConfigWriteError: If the backup or the config can't be written
    """
    if not path.is_absolute():
        raise ValueError(f"Config path must be absolute: {path}")
    if not server_name:
        raise ValueError("Server name must be non-empty")
    if not entry.command:
        raise ValueError("Server entry command must be non-empty")

    result = ReconcileResult(path=path)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreateError(path, f"Failed to create directory {path.parent}: {e}") from e

    document: dict[str, Any] = {MCP_SERVERS_KEY: {}}

    if path.exists():
        try:
            parsed = load_json_document(path)
        except ValueError as e:
            # UnicodeDecodeError lands here too
            logger.debug(f"Discarding unreadable config {path}: {e}")
            result.recovered_from_corrupt = True
            result.warnings.append(
                f"Could not parse existing config {path}, creating new one"
            )
        except OSError as e:
            raise ConfigWriteError(path, f"Failed to read {path}: {e}") from e
        else:
            try:
                result.backup_path = create_backup(path)
            except OSError as e:
                raise ConfigWriteError(path, f"Failed to back up {path}: {e}") from e

            if isinstance(parsed, dict):
                document = parsed
            else:
                result.warnings.append(
                    f"Existing config {path} is not a JSON object, replaced it "
                    f"(previous content saved to {result.backup_path})"
                )

    servers = document.get(MCP_SERVERS_KEY)
    if not isinstance(servers, dict):
        if servers is not None:
            result.warnings.append(
                f"'{MCP_SERVERS_KEY}' in {path} was not an object, replaced it "
                f"(previous content saved to {result.backup_path})"
            )
        document[MCP_SERVERS_KEY] = {}

    document[MCP_SERVERS_KEY][server_name] = entry.to_dict()

    try:
        write_host_config(path, document)
    except OSError as e:
        raise ConfigWriteError(path, f"Failed to write {path}: {e}") from e

    return result
