# ABOUTME: Verifier: read-only re-check of everything the installer sets up
# ABOUTME: Exits non-zero only on errors, never on warnings
from notion_mcp_setup import checks
from notion_mcp_setup.config import ProjectPaths
from notion_mcp_setup.dependencies import check_system_dependencies
from notion_mcp_setup.models import EXIT_FAILED, EXIT_SUCCESS, CheckReport
from notion_mcp_setup.output import StatusPrinter
from notion_mcp_setup.registry import ClaudeCodeRegistry

LOG_PREFIX = "[Notion MCP Verifier]"

SMOKE_TEST_TIMEOUT = 10  # seconds


class Verifier:
    """Runs every check and summarizes errors and warnings."""

    def __init__(
        self,
        paths: ProjectPaths,
        registry: ClaudeCodeRegistry | None = None,
        printer: StatusPrinter | None = None,
    ) -> None:
        self.paths = paths
        self.registry = registry if registry else ClaudeCodeRegistry()
        self.out = printer if printer else StatusPrinter(LOG_PREFIX)

    def _step(self, title: str, report: CheckReport) -> CheckReport:
        self.out.info(title)
        self.out.report(report)
        self.out.info("")
        return report

    def collect(self) -> CheckReport:
        """Run all checks, printing each as it completes."""
        report = CheckReport()
        report = report.merge(self._step(
            "Checking system dependencies...", check_system_dependencies()))
        report = report.merge(self._step(
            "Checking project build...",
            checks.check_project_build(self.paths, smoke_timeout=SMOKE_TEST_TIMEOUT)))
        report = report.merge(self._step(
            "Checking Claude Desktop configuration...", checks.check_desktop_config(self.paths)))
        report = report.merge(self._step(
            "Checking Claude Code CLI configuration...", checks.check_claude_code_cli(self.registry)))
        report = report.merge(self._step(
            "Checking Notion integration setup...", checks.check_notion_integration(self.paths)))
        report = report.merge(self._step(
            "Checking configuration backups...", checks.check_backups(self.paths)))
        return report

    def print_summary(self, report: CheckReport) -> None:
        self.out.rule("VERIFICATION SUMMARY")

        if not report.errors and not report.warnings:
            self.out.ok("All checks passed! Notion MCP server is ready to use.")
            return

        if report.errors:
            self.out.error(f"{len(report.errors)} error(s) found:")
            for error in report.errors:
                self.out.info(f"   - {error}")

        if report.warnings:
            self.out.warning(f"{len(report.warnings)} warning(s) found:")
            for warning in report.warnings:
                self.out.info(f"   - {warning}")

        self.out.info("")
        if report.errors:
            self.out.error("Please fix the errors above before using the Notion MCP server.")
        else:
            self.out.warning("The server should work, but consider addressing the warnings above.")

    def run(self) -> int:
        self.out.info("Starting Notion MCP Server verification...")
        self.out.info("")

        report = self.collect()
        self.print_summary(report)

        return EXIT_FAILED if report.has_errors else EXIT_SUCCESS
