#!/usr/bin/env python3
"""
Utility functions for running external commands and SDK calls.
"""
import subprocess
import sys

from botocore.exceptions import BotoCoreError, ClientError


MAX_OUTPUT_BYTES = 1024 * 1024 * 10  # 10MB
NO_UPDATES_MESSAGE = 'No updates are to be performed'


def _truncate(text):
    if text and len(text) > MAX_OUTPUT_BYTES:
        return text[:MAX_OUTPUT_BYTES]
    return text or ''


def _execute(command):
    return subprocess.run(
        command,
        shell=isinstance(command, str),
        capture_output=True,
        text=True
    )


def run_command(command, description, log=print):
    """
    Run a command and exit if it fails.

    Stack and bucket work goes through boto3; this is kept for ad-hoc AWS CLI
    steps where a failure should stop the run.

    Args:
        command: Shell command string or argument list
        description: Human readable description, logged before running
        log: Callable used to log the description

    Returns:
        Captured stdout of the command.
    """
    log(description)
    try:
        result = _execute(command)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    stdout = _truncate(result.stdout)
    stderr = _truncate(result.stderr)
    if result.returncode != 0:
        print(f"Error: command failed with exit code {result.returncode}", file=sys.stderr)
        if stdout:
            print(f"STDOUT: {stdout}")
        if stderr:
            print(f"STDERR: {stderr}", file=sys.stderr)
        sys.exit(1)

    return stdout


def run_command_safe(command, description, log=print):
    """
    Run a command without exiting on failure.

    Returns {'success': True, 'result': stdout} or
    {'success': False, 'error': ..., 'stdout': ..., 'stderr': ...}.
    """
    log(description)
    try:
        result = _execute(command)
    except OSError as e:
        return {'success': False, 'error': str(e), 'stdout': '', 'stderr': ''}

    stdout = _truncate(result.stdout)
    stderr = _truncate(result.stderr)
    if result.returncode != 0:
        return {
            'success': False,
            'error': f"Command failed with exit code {result.returncode}: {stderr.strip()}",
            'stdout': stdout,
            'stderr': stderr,
        }
    return {'success': True, 'result': stdout}


def call_safe(fn, description, log=print, **kwargs):
    """
    Same contract as run_command_safe, for a boto3 client call.

    A ClientError becomes a failed outcome that also carries the error code.
    Other botocore failures (connection, credentials) have no code.
    """
    log(description)
    try:
        return {'success': True, 'result': fn(**kwargs)}
    except ClientError as e:
        error = e.response.get('Error', {})
        return {
            'success': False,
            'error': error.get('Message') or str(e),
            'code': error.get('Code'),
            'stdout': '',
            'stderr': str(e),
        }
    except BotoCoreError as e:
        return {'success': False, 'error': str(e), 'code': None, 'stdout': '', 'stderr': str(e)}


def is_no_updates(outcome):
    """
    True when a failed outcome is CloudFormation reporting that the stack is
    already up to date.
    """
    if outcome.get('success'):
        return False
    # SDK outcomes carry a structured code, CLI outcomes only carry text
    if 'code' in outcome and outcome['code'] != 'ValidationError':
        return False
    text = ' '.join(outcome.get(k) or '' for k in ('error', 'stdout', 'stderr'))
    return NO_UPDATES_MESSAGE in text
