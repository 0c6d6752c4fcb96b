"""
End-to-end tests for the command line entry point and its exit codes.
Run with: pytest tests/test_main.py -v
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from portmonitor.main import (
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    EXIT_PORTS_OPEN,
    EXIT_USAGE,
    build_parsers,
    resolve_plan,
    run,
)

POST = "portmonitor.notifiers.base.requests.post"


@pytest.fixture
def loopback_only():
    """Scan 127.0.0.1 as if it were the only interface address"""
    with patch("portmonitor.main.discover_addresses", return_value=["127.0.0.1"]), \
            patch("portmonitor.main.get_hostname", return_value="testhost"):
        yield


class TestUsage:
    """Test usage handling"""

    def test_no_arguments(self, capsys):
        """Test no arguments prints usage and exits 2"""
        assert run([]) == EXIT_USAGE
        assert "usage: portmonitor <command>" in capsys.readouterr().out

    def test_help(self, capsys):
        """Test 'help' prints usage and exits 2"""
        assert run(["help"]) == EXIT_USAGE
        assert "properties" in capsys.readouterr().out

    def test_unknown_command(self, capsys):
        """Test an unknown subcommand exits 2"""
        assert run(["scan", "--range=1-2"]) == EXIT_USAGE
        assert "unknown parameters" in capsys.readouterr().out

    def test_unknown_flag(self):
        """Test argparse errors exit 2"""
        assert run(["params", "--bogus"]) == EXIT_USAGE


class TestParseCommandLine:
    """Test flag parsing into a plan"""

    def _plan(self, argv):
        command = argv[0]
        args = build_parsers()[command].parse_args(argv[1:])
        return resolve_plan(command, args)

    def test_start_end(self):
        """Test --start/--end"""
        plan = self._plan(["params", "--start=82", "--end=1022"])
        assert plan.ports_range == (82, 1022)

    def test_range(self):
        """Test --range"""
        plan = self._plan(["params", "--range=83-1023"])
        assert plan.ports_range == (83, 1023)

    def test_list(self):
        """Test --list"""
        plan = self._plan(["params", "--list=83,94,122"])
        assert plan.ports_list == [83, 94, 122]
        assert plan.timeout is None

    def test_webhooks_and_flags(self):
        """Test webhook URLs, --verify and --debug"""
        plan = self._plan([
            "params", "--list=80", "--slack=https://hooks.slack.example/T000",
            "--msteams=https://teams.example/webhook", "--verify", "--debug", "--timeout=0.5",
        ])
        assert plan.notify_target == "https://hooks.slack.example/T000"
        assert plan.teams_target == "https://teams.example/webhook"
        assert plan.verify_mode and plan.debug
        assert plan.timeout == 0.5

    def test_properties(self, props_file):
        """Test properties mode flags name properties"""
        plan = self._plan(["properties", f"--file={props_file}", "--list=portlist.test"])
        assert plan.ports_list == [81, 91, 1040]


class TestExitCodes:
    """Test the exit code of a full run"""

    def test_resolution_error(self, capsys):
        """Test a bad range exits 1"""
        assert run(["params", "--range=8080"]) == EXIT_CONFIG_ERROR
        assert "Usage of portmonitor params" in capsys.readouterr().err

    def test_resolution_error_reported_once(self, capsys):
        """Test the error text appears once, in the error panel only"""
        assert run(["params", "--range=8080"]) == EXIT_CONFIG_ERROR
        err = capsys.readouterr().err
        assert err.count("is not a range") == 1
        assert "Configuration Error" in err

    def test_no_specification(self):
        """Test no ports at all exits 1"""
        assert run(["params", "--webhook=https://hooks.slack.example/T000"]) == EXIT_CONFIG_ERROR

    def test_properties_without_file(self):
        """Test properties mode requires --file"""
        assert run(["properties", "--list=portlist.test"]) == EXIT_CONFIG_ERROR

    def test_properties_unreadable_file(self, tmp_path):
        """Test an unreadable properties file exits 1"""
        missing = str(tmp_path / "missing.properties")
        assert run(["properties", f"--file={missing}", "--list=portlist.test"]) == EXIT_CONFIG_ERROR

    def test_properties_missing_key(self, props_file):
        """Test a missing property exits 1"""
        assert run(["properties", f"--file={props_file}", "--range=no.such.key"]) == EXIT_CONFIG_ERROR

    def test_nothing_open(self, loopback_only, closed_port):
        """Test a scan without open ports exits 0 and sends nothing"""
        with patch(POST) as post:
            code = run(["params", f"--list={closed_port}", "--webhook=https://hooks.slack.example/T000"])
        assert code == EXIT_OK
        post.assert_not_called()

    def test_open_port(self, loopback_only, listening_port):
        """Test an open port exits 10 and notifies the webhook"""
        response = MagicMock()
        response.raise_for_status.return_value = None
        with patch(POST, return_value=response) as post:
            code = run(["params", f"--list={listening_port}", "--webhook=https://hooks.slack.example/T000"])

        assert code == EXIT_PORTS_OPEN
        post.assert_called_once()
        attachment = post.call_args[1]["json"]["attachments"][0]
        assert attachment["title"] == "Ports is still open on testhost"
        assert f"Port {listening_port} for 127.0.0.1 is open." in attachment["text"]

    def test_verify_mode(self, loopback_only, closed_port):
        """Test --verify notifies even with nothing open"""
        response = MagicMock()
        response.raise_for_status.return_value = None
        with patch(POST, return_value=response) as post:
            code = run(["params", f"--list={closed_port}", "--msteams=https://teams.example/webhook", "--verify"])
        assert code == EXIT_OK
        post.assert_called_once()

    def test_notification_failure_keeps_exit_code(self, loopback_only, listening_port):
        """Test a failed delivery does not change the scan exit code"""
        with patch(POST, side_effect=requests.ConnectionError("refused")):
            code = run(["params", f"--list={listening_port}", "--webhook=https://hooks.slack.example/T000"])
        assert code == EXIT_PORTS_OPEN

    def test_no_addresses(self):
        """Test a host without addresses exits 0"""
        with patch("portmonitor.main.discover_addresses", return_value=[]):
            assert run(["params", "--range=1-3"]) == EXIT_OK
