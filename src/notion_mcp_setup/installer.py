# ABOUTME: Installer: dependencies, build, smoke test, then host configuration
# ABOUTME: Dependency, build and desktop-config failures are fatal; CLI registration is not
import logging

from notion_mcp_setup.checks import smoke_test_cli
from notion_mcp_setup.config import SERVER_NAME, TOKEN_ENV_VAR, InstallSettings, ProjectPaths
from notion_mcp_setup.dependencies import check_system_dependencies
from notion_mcp_setup.models import EXIT_FAILED, EXIT_SUCCESS, CheckReport, ServerEntry
from notion_mcp_setup.output import StatusPrinter
from notion_mcp_setup.reconcile import ReconcileError, reconcile
from notion_mcp_setup.registry import ClaudeCodeRegistry
from notion_mcp_setup.utils.process import run_command

logger = logging.getLogger(__name__)

LOG_PREFIX = "[Notion MCP Installer]"

NPM_TIMEOUT = 600  # seconds
SMOKE_TEST_TIMEOUT = 15  # seconds


class InstallError(Exception):
    """A fatal install step failed."""

    def __init__(self, step: str, message: str) -> None:
        super().__init__(message)
        self.step = step


def desktop_entry(paths: ProjectPaths, settings: InstallSettings) -> ServerEntry:
    """The entry written for this checkout."""
    return ServerEntry(
        command="node",
        args=[str(paths.cli_artifact)],
        env={TOKEN_ENV_VAR: settings.notion_token or ""},
    )


class Installer:
    """Builds the server checkout and configures both hosts.

    ABOUTME: Each step returns a CheckReport; warnings are merged and summarized
    ABOUTME: Fatal steps raise InstallError, caught once in run()
    """

    def __init__(
        self,
        paths: ProjectPaths,
        settings: InstallSettings,
        registry: ClaudeCodeRegistry | None = None,
        printer: StatusPrinter | None = None,
    ) -> None:
        self.paths = paths
        self.settings = settings
        self.registry = registry if registry else ClaudeCodeRegistry(verbose=settings.verbose)
        self.out = printer if printer else StatusPrinter(LOG_PREFIX)

    def check_dependencies(self) -> CheckReport:
        self.out.info("Checking system dependencies...")
        report = check_system_dependencies()
        self.out.report(report)
        if report.has_errors:
            raise InstallError("dependencies", report.errors[0])
        self.out.ok("System dependencies check completed")
        return report

    def _npm(self, *args: str) -> None:
        result = run_command(
            ["npm", *args],
            cwd=self.paths.project_root,
            timeout=NPM_TIMEOUT,
            capture=not self.settings.verbose,
        )
        if not result.ok:
            raise InstallError(
                "build",
                f"Failed to build project: 'npm {' '.join(args)}' failed: {result.describe_failure()}",
            )

    def build_project(self) -> CheckReport:
        """Run npm install and npm run build, then check the artifact.

        Raises:
            InstallError: On any non-zero exit or a missing artifact
        """
        self.out.info("Building Notion MCP server...")

        self.out.info("Installing dependencies...")
        self._npm("install")

        self.out.info("Building project...")
        self._npm("run", "build")

        if not self.paths.cli_artifact.is_file():
            raise InstallError(
                "build", f"Failed to build project: CLI binary not found at {self.paths.cli_artifact}"
            )

        report = CheckReport()
        report.ok("Project build completed successfully")
        self.out.report(report)
        return report

    def test_server(self) -> CheckReport:
        self.out.info("Testing Notion MCP server...")
        failure = smoke_test_cli(self.paths.cli_artifact, timeout=SMOKE_TEST_TIMEOUT)
        if failure:
            raise InstallError("smoke-test", f"Notion MCP server test failed: {failure}")

        report = CheckReport()
        report.ok("Notion MCP server test completed successfully")
        self.out.report(report)
        return report

    def configure_desktop(self) -> CheckReport:
        """Reconcile the Claude Desktop config.

        Raises:
            InstallError: If the config directory or file can't be written
        """
        self.out.info("Configuring Claude Desktop...")
        config_path = self.paths.desktop_config
        report = CheckReport()

        try:
            result = reconcile(config_path, SERVER_NAME, desktop_entry(self.paths, self.settings))
        except ReconcileError as e:
            raise InstallError(
                "desktop-config", f"Failed to write Claude Desktop configuration: {e}"
            ) from e

        for warning in result.warnings:
            report.warning(warning)
        if result.backup_path:
            report.info(f"Backed up existing configuration to: {result.backup_path}")
        report.ok(f"Claude Desktop configuration updated: {result.path}")

        self.out.report(report)
        return report

    def configure_claude_code(self) -> CheckReport:
        """Register the server with the Claude Code CLI.

        ABOUTME: Never raises; failures become a warning with a manual command
        """
        self.out.info("Configuring Claude Code CLI...")
        report = CheckReport()

        env = {TOKEN_ENV_VAR: self.settings.notion_token} if self.settings.notion_token else None
        outcome = self.registry.register(
            SERVER_NAME, "node", [str(self.paths.cli_artifact)], env
        )

        if outcome.already_present:
            report.ok("Claude Code CLI MCP server already configured")
        elif outcome.success:
            report.ok(f"Claude Code CLI configuration completed (scope: {self.registry.scope})")
        else:
            report.warning(f"Failed to configure Claude Code CLI: {outcome.detail}")
            report.info(f"You may need to manually run: {outcome.manual_command}")

        self.out.report(report)
        return report

    def print_summary(self, report: CheckReport) -> None:
        self.out.ok("Installation completed successfully!")
        self.out.info("")

        if report.warnings:
            self.out.info(f"{len(report.warnings)} warning(s):")
            for warning in report.warnings:
                self.out.warning(f"  - {warning}")
            self.out.info("")

        self.out.info("Next steps:")
        if not self.settings.notion_token:
            self.out.info(f"- Set {TOKEN_ENV_VAR} in the configuration files")
        self.out.info("- Restart Claude Desktop to load the new MCP server")
        self.out.info('- Check Claude Code CLI with "claude mcp list"')
        self.out.info('- Run "notion-mcp-verify" to verify the installation')

    def run(self) -> int:
        """Run every install step in order.

        Returns:
            EXIT_SUCCESS, or EXIT_FAILED if a fatal step failed
        """
        self.out.info("Starting Notion MCP Server installation...")
        if self.settings.source:
            self.out.info(f"Loaded configuration from: {self.settings.source}")
        else:
            self.out.info("Using default configuration (no config file found)")

        report = CheckReport()
        try:
            report = report.merge(self.check_dependencies())
            report = report.merge(self.build_project())
            report = report.merge(self.test_server())
            report = report.merge(self.configure_desktop())
            report = report.merge(self.configure_claude_code())
        except InstallError as e:
            logger.debug(f"Install step '{e.step}' failed", exc_info=True)
            self.out.error(str(e))
            self.out.error("Installation failed")
            return EXIT_FAILED

        self.out.info("")
        self.print_summary(report)
        return EXIT_SUCCESS
