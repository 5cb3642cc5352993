# notion-mcp-setup - Notion MCP server installer and verifier
# ABOUTME: Version information
__version__ = "0.1.0"

# ABOUTME: Export core data models
from notion_mcp_setup.models import CheckReport, RegistryStatus, ServerEntry, ToolVersion

# ABOUTME: Export the reconciler
from notion_mcp_setup.reconcile import (
    ConfigWriteError,
    DirectoryCreateError,
    ReconcileError,
    ReconcileResult,
    reconcile,
)

__all__ = [
    "__version__",
    "CheckReport",
    "RegistryStatus",
    "ServerEntry",
    "ToolVersion",
    "ConfigWriteError",
    "DirectoryCreateError",
    "ReconcileError",
    "ReconcileResult",
    "reconcile",
]
