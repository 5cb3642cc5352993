# ABOUTME: Human-readable status lines for the installer and verifier
# ABOUTME: Plain print() with ✓/⚠/✗ markers, like the rest of the CLI output
from notion_mcp_setup.models import CheckReport

MARKERS = {
    "ok": "✓",
    "info": " ",
    "warning": "⚠",
    "error": "✗",
}


class StatusPrinter:
    """Prints prefixed status lines."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix

    def line(self, message: str, severity: str = "info") -> None:
        if not message:
            print()
            return
        print(f"{MARKERS.get(severity, ' ')} {self.prefix} {message}")

    def info(self, message: str) -> None:
        self.line(message, "info")

    def ok(self, message: str) -> None:
        self.line(message, "ok")

    def warning(self, message: str) -> None:
        self.line(message, "warning")

    def error(self, message: str) -> None:
        self.line(message, "error")

    def report(self, report: CheckReport) -> None:
        """Print every message of a report in recorded order."""
        for msg in report.messages:
            self.line(msg.message, msg.severity)

    def rule(self, title: str) -> None:
        self.info("=" * 50)
        self.info(title)
        self.info("=" * 50)
