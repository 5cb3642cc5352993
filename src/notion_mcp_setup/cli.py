# CLI interface for notion-mcp-setup
import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from notion_mcp_setup import __version__
from notion_mcp_setup.config import UnsupportedPlatformError, ProjectPaths, load_settings
from notion_mcp_setup.installer import Installer
from notion_mcp_setup.models import EXIT_CONFIG_ERROR, EXIT_FATAL, EXIT_SUCCESS
from notion_mcp_setup.verifier import Verifier


def configure_logging(verbose: bool) -> None:
    """Configure root logging.

    ABOUTME: DEBUG with --verbose, otherwise only warnings and above
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def _resolve_paths(args: argparse.Namespace) -> ProjectPaths:
    root = Path(args.project_root) if args.project_root else Path.cwd()
    desktop_config = Path(args.desktop_config).expanduser().resolve() if args.desktop_config else None
    return ProjectPaths.from_root(root, desktop_config=desktop_config)


def cmd_install(args: argparse.Namespace) -> int:
    """Execute install command.

    ABOUTME: Loads settings once, then runs every install step
    ABOUTME: Returns exit code from the installer, or a config error code
    """
    print(f"notion-mcp-setup install v{__version__}")
    print()

    root = Path(args.project_root) if args.project_root else Path.cwd()
    try:
        settings = load_settings(Path(args.config) if args.config else None, root)
    except ValueError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR

    if args.verbose:
        settings = dataclasses.replace(settings, verbose=True)
    configure_logging(settings.verbose)

    try:
        paths = _resolve_paths(args)
        return Installer(paths, settings).run()
    except UnsupportedPlatformError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except Exception as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL


def cmd_verify(args: argparse.Namespace) -> int:
    """Execute verify command.

    ABOUTME: Read-only; never modifies config files or the registry
    """
    print(f"notion-mcp-setup verify v{__version__}")
    print()

    configure_logging(args.verbose)

    try:
        paths = _resolve_paths(args)
        return Verifier(paths).run()
    except UnsupportedPlatformError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except Exception as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project-root",
        help="Notion MCP server checkout (default: current directory)"
    )
    parser.add_argument(
        "--desktop-config",
        help="Claude Desktop config file (default: OS-specific location)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show command output and debug logging"
    )


def _add_install_arguments(parser: argparse.ArgumentParser) -> None:
    _add_common_arguments(parser)
    parser.add_argument(
        "--config",
        help="Installer settings JSON (default: <project-root>/scripts/install-config.json)"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notion-mcp-setup",
        description="Install and verify the Notion MCP server for Claude Desktop and Claude Code"
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"notion-mcp-setup v{__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    install_parser = subparsers.add_parser(
        "install",
        help="Build the server and configure Claude Desktop and Claude Code CLI"
    )
    _add_install_arguments(install_parser)

    verify_parser = subparsers.add_parser(
        "verify",
        help="Check the installation without changing anything"
    )
    _add_common_arguments(verify_parser)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    ABOUTME: Parses args and dispatches to appropriate command
    ABOUTME: Returns exit code for sys.exit()
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "install":
        return cmd_install(args)
    elif args.command == "verify":
        return cmd_verify(args)
    else:
        parser.print_help()
        return EXIT_SUCCESS


def install_main(argv: list[str] | None = None) -> int:
    """Entry point for the standalone notion-mcp-install script."""
    parser = argparse.ArgumentParser(
        prog="notion-mcp-install",
        description="Install the Notion MCP server for Claude Desktop and Claude Code"
    )
    _add_install_arguments(parser)
    return cmd_install(parser.parse_args(argv))


def verify_main(argv: list[str] | None = None) -> int:
    """Entry point for the standalone notion-mcp-verify script."""
    parser = argparse.ArgumentParser(
        prog="notion-mcp-verify",
        description="Verify the Notion MCP server installation"
    )
    _add_common_arguments(parser)
    return cmd_verify(parser.parse_args(argv))


if __name__ == "__main__":
    sys.exit(main())
