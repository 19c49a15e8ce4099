"""Unit tests for the command runner and no-op update detection."""
import os
import subprocess
import sys
from unittest.mock import patch
import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

_repo_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
if _repo_root not in sys.path:
    sys.path.insert(0, _repo_root)

from aws import utils


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args="cmd", returncode=returncode, stdout=stdout, stderr=stderr)


class TestRunCommand:
    """Tests for the strict runner."""

    def test_returns_stdout_on_success(self):
        logged = []
        with patch("aws.utils.subprocess.run", return_value=_completed(stdout="hello\n")):
            out = utils.run_command("echo hello", "Saying hello", log=logged.append)
        assert out == "hello\n"
        assert logged == ["Saying hello"]

    def test_exits_on_failure(self, capsys):
        with patch("aws.utils.subprocess.run", return_value=_completed(1, stdout="partial", stderr="boom")):
            with pytest.raises(SystemExit) as exc:
                utils.run_command("false", "Failing", log=lambda m: None)
        assert exc.value.code == 1
        captured = capsys.readouterr()
        assert "STDOUT: partial" in captured.out
        assert "STDERR: boom" in captured.err

    def test_exits_when_binary_missing(self):
        with pytest.raises(SystemExit):
            utils.run_command(["definitely-not-a-real-binary-xyz"], "Missing", log=lambda m: None)

    def test_string_command_runs_through_shell(self):
        with patch("aws.utils.subprocess.run", return_value=_completed()) as mock_run:
            utils.run_command("aws --version", "Checking", log=lambda m: None)
        assert mock_run.call_args.kwargs["shell"] is True

    def test_list_command_runs_without_shell(self):
        with patch("aws.utils.subprocess.run", return_value=_completed()) as mock_run:
            utils.run_command(["aws", "--version"], "Checking", log=lambda m: None)
        assert mock_run.call_args.kwargs["shell"] is False

    def test_output_is_capped(self):
        with patch("aws.utils.MAX_OUTPUT_BYTES", 5):
            with patch("aws.utils.subprocess.run", return_value=_completed(stdout="0123456789")):
                out = utils.run_command("cmd", "Big output", log=lambda m: None)
        assert out == "01234"


class TestRunCommandSafe:
    """Tests for the safe runner."""

    def test_success(self):
        with patch("aws.utils.subprocess.run", return_value=_completed(stdout="ok")):
            outcome = utils.run_command_safe("cmd", "Running", log=lambda m: None)
        assert outcome == {"success": True, "result": "ok"}

    def test_failure_returns_outcome(self):
        with patch("aws.utils.subprocess.run", return_value=_completed(2, stdout="out", stderr="err")):
            outcome = utils.run_command_safe("cmd", "Running", log=lambda m: None)
        assert outcome["success"] is False
        assert outcome["stdout"] == "out"
        assert outcome["stderr"] == "err"
        assert "exit code 2" in outcome["error"]

    def test_missing_binary_is_failure_not_exception(self):
        outcome = utils.run_command_safe(["definitely-not-a-real-binary-xyz"], "Missing", log=lambda m: None)
        assert outcome["success"] is False
        assert outcome["error"]


class TestCallSafe:
    """Tests for call_safe around SDK calls."""

    def test_success_wraps_result(self):
        outcome = utils.call_safe(lambda **kw: kw, "Calling", log=lambda m: None, StackName="s")
        assert outcome == {"success": True, "result": {"StackName": "s"}}

    def test_client_error_keeps_code(self):
        def fail(**kwargs):
            raise ClientError({"Error": {"Code": "ValidationError", "Message": "bad"}}, "UpdateStack")
        outcome = utils.call_safe(fail, "Calling", log=lambda m: None)
        assert outcome["success"] is False
        assert outcome["code"] == "ValidationError"
        assert outcome["error"] == "bad"

    def test_botocore_error_has_no_code(self):
        def fail(**kwargs):
            raise EndpointConnectionError(endpoint_url="https://cloudformation.us-east-1.amazonaws.com")
        outcome = utils.call_safe(fail, "Calling", log=lambda m: None)
        assert outcome["success"] is False
        assert outcome["code"] is None
        assert "Could not connect" in outcome["error"]
        assert utils.is_no_updates(outcome) is False


class TestIsNoUpdates:
    """Tests for no-op update classification."""

    def test_cli_failure_with_message_in_stderr(self):
        outcome = {
            "success": False,
            "error": "Command failed with exit code 254",
            "stdout": "",
            "stderr": "An error occurred (ValidationError) when calling the UpdateStack operation: "
                      "No updates are to be performed.",
        }
        assert utils.is_no_updates(outcome) is True

    def test_sdk_failure_with_validation_error(self):
        outcome = {"success": False, "error": "No updates are to be performed.", "code": "ValidationError"}
        assert utils.is_no_updates(outcome) is True

    def test_sdk_failure_with_other_code(self):
        outcome = {"success": False, "error": "No updates are to be performed.", "code": "AccessDenied"}
        assert utils.is_no_updates(outcome) is False

    def test_other_failure(self):
        outcome = {"success": False, "error": "Template format error", "code": "ValidationError"}
        assert utils.is_no_updates(outcome) is False

    def test_success_is_not_no_op(self):
        assert utils.is_no_updates({"success": True, "result": ""}) is False
