# ABOUTME: Tests for Node.js/npm version checks
# ABOUTME: Subprocess calls go through the FakeRunner fixture
import pytest

from notion_mcp_setup.dependencies import (
    MIN_NODE_MAJOR,
    check_system_dependencies,
    check_tool_version,
    parse_major_version,
)


@pytest.mark.parametrize(
    "version, expected",
    [
        ("v18.17.0", 18),
        ("v16.0.0\n", 16),
        ("10.2.4", 10),
        ("  v22.1.0", 22),
        ("nightly-2024", None),
        ("", None),
    ],
)
def test_parse_major_version(version, expected) -> None:
    assert parse_major_version(version) == expected


class TestCheckToolVersion:
    """Tests for check_tool_version function."""

    def test_satisfies_minimum(self, fake_runner) -> None:
        fake_runner.set("node", "--version", stdout="v20.11.1\n")

        result = check_tool_version("node", min_major=MIN_NODE_MAJOR)

        assert result.found is True
        assert result.satisfies_minimum is True
        assert result.version_string == "v20.11.1"
        assert result.major == 20

    def test_exact_minimum(self, fake_runner) -> None:
        fake_runner.set("node", "--version", stdout="v16.20.2\n")
        assert check_tool_version("node", min_major=16).satisfies_minimum is True

    def test_too_old_keeps_version_verbatim(self, fake_runner) -> None:
        """Test that an old runtime fails the minimum but is still reported."""
        fake_runner.set("node", "--version", stdout="v14.21.3\n")

        result = check_tool_version("node", min_major=MIN_NODE_MAJOR)

        assert result.found is True
        assert result.satisfies_minimum is False
        assert result.version_string == "v14.21.3"
        assert result.major == 14

    def test_missing_tool_is_distinct(self, fake_runner) -> None:
        fake_runner.missing("node")

        result = check_tool_version("node", min_major=MIN_NODE_MAJOR)

        assert result.found is False
        assert result.version_string is None

    def test_nonzero_exit_is_not_found(self, fake_runner) -> None:
        fake_runner.set("npm", "--version", returncode=1, stderr="broken install")
        assert check_tool_version("npm").found is False

    def test_timeout_is_not_found(self, fake_runner) -> None:
        fake_runner.set("npm", "--version", returncode=None, error="timed out after 10 seconds")
        assert check_tool_version("npm").found is False

    def test_unparseable_with_minimum(self, fake_runner) -> None:
        fake_runner.set("node", "--version", stdout="custom-build\n")
        result = check_tool_version("node", min_major=16)
        assert result.found is True
        assert result.satisfies_minimum is False

    def test_no_minimum_always_satisfied(self, fake_runner) -> None:
        fake_runner.set("npm", "--version", stdout="6.0.0\n")
        assert check_tool_version("npm").satisfies_minimum is True


class TestCheckSystemDependencies:
    """Tests for check_system_dependencies function."""

    def test_all_present(self, fake_runner) -> None:
        report = check_system_dependencies()
        assert not report.has_errors
        assert any("v20.11.1" in msg for msg in report.passed)
        assert any("10.2.4" in msg for msg in report.passed)

    def test_old_node_is_error(self, fake_runner) -> None:
        fake_runner.set("node", "--version", stdout="v14.0.0\n")

        report = check_system_dependencies()

        assert report.has_errors
        assert "16 or higher" in report.errors[0]
        assert "v14.0.0" in report.errors[0]

    def test_missing_node(self, fake_runner) -> None:
        fake_runner.missing("node")
        report = check_system_dependencies()
        assert report.errors == ["Node.js is not installed or not in PATH"]

    def test_missing_npm(self, fake_runner) -> None:
        fake_runner.missing("npm")
        report = check_system_dependencies()
        assert report.errors == ["npm is not installed or not in PATH"]
