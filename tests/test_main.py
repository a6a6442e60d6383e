"""Tests for CLI argument handling in main.py."""
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from clipaccum.accumulator_state import AccumulatorState
from clipaccum.main import main
from clipaccum.protocol import ProtocolError


class TestCLIArguments:
    """Tests for command-line argument validation."""

    def test_no_mode_specified_exits_with_code_2(self):
        """Test that missing --daemon or --command gives usage error."""
        runner = CliRunner()
        result = runner.invoke(main, ["--socket", "/tmp/test.sock"])
        assert result.exit_code == 2
        assert "must be specified" in result.output

    def test_both_modes_specified_exits_with_code_2(self):
        """Test that both --daemon and --command gives usage error."""
        runner = CliRunner()
        result = runner.invoke(
            main, ["--daemon", "--command", "status", "--socket", "/tmp/test.sock"]
        )
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_missing_socket_exits_with_code_2(self):
        """Test that missing --socket gives usage error."""
        runner = CliRunner()
        result = runner.invoke(main, ["--daemon"])
        assert result.exit_code == 2
        assert "socket" in result.output.lower()

    def test_unknown_backend_exits_with_code_2(self):
        """Test that an unknown backend is rejected."""
        runner = CliRunner()
        result = runner.invoke(
            main, ["--daemon", "--socket", "/tmp/test.sock", "--backend", "wayland"]
        )
        assert result.exit_code == 2

    def test_help_exits_with_code_0(self):
        """Test that --help exits cleanly with code 0."""
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "daemon" in result.output.lower()
        assert "command" in result.output.lower()


class TestDaemonMode:
    """Tests for --daemon dispatch."""

    def test_daemon_passes_initial_flags(self):
        """Test daemon options become the initial accumulator state."""
        runner = CliRunner()
        with patch("clipaccum.service.run_daemon", new_callable=AsyncMock) as mock_run:
            result = runner.invoke(main, [
                "--daemon", "--socket", "/tmp/test.sock", "--backend", "x11",
                "--no-newline", "--clear-on-paste", "--disabled", "--no-paste-hotkey",
            ])
        assert result.exit_code == 0, result.output
        mock_run.assert_awaited_once_with(
            "x11",
            "/tmp/test.sock",
            AccumulatorState(enabled=False, clear_on_paste=True, insert_newline=False),
            False,
        )

    def test_daemon_defaults(self):
        """Test default daemon flags match the accumulator defaults."""
        runner = CliRunner()
        with patch("clipaccum.service.run_daemon", new_callable=AsyncMock) as mock_run:
            result = runner.invoke(main, ["--daemon", "--socket", "/tmp/test.sock"])
        assert result.exit_code == 0, result.output
        mock_run.assert_awaited_once_with("auto", "/tmp/test.sock", AccumulatorState(), True)


class TestCommandMode:
    """Tests for --command dispatch."""

    def test_prints_response(self):
        """Test a successful response is printed to stdout."""
        runner = CliRunner()
        with patch("clipaccum.control_client.send_command", new_callable=AsyncMock) as mock_send:
            mock_send.return_value = "ok"
            result = runner.invoke(main, ["--command", "clear", "--socket", "/tmp/test.sock"])
        assert result.exit_code == 0
        assert result.output == "ok\n"
        mock_send.assert_awaited_once_with("/tmp/test.sock", "clear")

    def test_error_response_exits_with_code_1(self):
        """Test an error response exits with status 1."""
        runner = CliRunner()
        with patch("clipaccum.control_client.send_command", new_callable=AsyncMock) as mock_send:
            mock_send.return_value = "error: unknown command: x"
            result = runner.invoke(main, ["--command", "x", "--socket", "/tmp/test.sock"])
        assert result.exit_code == 1

    def test_connection_error_exits_with_code_1(self):
        """Test an unreachable daemon exits with status 1."""
        runner = CliRunner()
        with patch("clipaccum.control_client.send_command", new_callable=AsyncMock) as mock_send:
            mock_send.side_effect = ConnectionError("Failed to connect")
            result = runner.invoke(main, ["--command", "status", "--socket", "/tmp/test.sock"])
        assert result.exit_code == 1
        assert "Failed to connect" in result.output

    def test_protocol_error_exits_with_code_1(self):
        """Test a malformed response exits with status 1."""
        runner = CliRunner()
        with patch("clipaccum.control_client.send_command", new_callable=AsyncMock) as mock_send:
            mock_send.side_effect = ProtocolError("Expected comma terminator")
            result = runner.invoke(main, ["--command", "status", "--socket", "/tmp/test.sock"])
        assert result.exit_code == 1
