# ABOUTME: Utility modules for notion-mcp-setup
# ABOUTME: Exports backup and subprocess helpers

from notion_mcp_setup.utils.backup import backup_path_for, create_backup, list_backups
from notion_mcp_setup.utils.process import CommandResult, run_command

__all__ = [
    "backup_path_for",
    "create_backup",
    "list_backups",
    "CommandResult",
    "run_command",
]
