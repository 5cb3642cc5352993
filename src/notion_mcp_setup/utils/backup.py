# ABOUTME: Backup utilities for host configuration files.
# ABOUTME: Backups sit next to the original as <name>.backup.<millisecond epoch>.
import logging
import re
import shutil
import time
from pathlib import Path

logger = logging.getLogger(__name__)

BACKUP_MARKER = ".backup."


def backup_path_for(source_path: Path, stamp_ms: int) -> Path:
    """Return the sibling backup path for a given millisecond stamp."""
    return source_path.with_name(f"{source_path.name}{BACKUP_MARKER}{stamp_ms}")


def create_backup(source_path: Path) -> Path:
    """Create a timestamped sibling backup of a file.

    ABOUTME: Backup format: {filename}.backup.{epoch_ms}
    ABOUTME: Bumps the stamp until unused so every call gets its own file
    ABOUTME: Uses shutil.copy2() to preserve content byte-for-byte plus metadata

    Args:
        source_path: Path to file to backup

    Returns:
        Path to created backup file

    Raises:
        FileNotFoundError: If source_path doesn't exist
        OSError: If backup creation fails

    Examples:
        >>> source = Path("~/.config/claude/claude_desktop_config.json").expanduser()
        >>> create_backup(source).name
        'claude_desktop_config.json.backup.1767882622123'
    """
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {source_path}")

    stamp = int(time.time() * 1000)
    backup_path = backup_path_for(source_path, stamp)
    while backup_path.exists():
        stamp += 1
        backup_path = backup_path_for(source_path, stamp)

    shutil.copy2(source_path, backup_path)
    logger.debug(f"Backed up {source_path} to {backup_path}")

    return backup_path


def list_backups(source_path: Path) -> list[Path]:
    """List existing backups of a file, newest first.

    ABOUTME: Only matches siblings named {filename}.backup.{digits}
    ABOUTME: Returns empty list when the parent directory doesn't exist
    """
    parent = source_path.parent
    if not parent.is_dir():
        return []

    pattern = re.compile(re.escape(f"{source_path.name}{BACKUP_MARKER}") + r"(\d+)")
    backups: list[tuple[int, Path]] = []
    for candidate in parent.iterdir():
        match = pattern.fullmatch(candidate.name)
        if match and candidate.is_file():
            backups.append((int(match.group(1)), candidate))

    backups.sort(key=lambda x: x[0], reverse=True)
    return [path for _stamp, path in backups]
