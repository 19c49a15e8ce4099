#!/usr/bin/env python3
"""
Pre-flight checks: AWS CLI available and credentials usable.
"""
import sys

from botocore.exceptions import BotoCoreError, ClientError

from .utils import run_command_safe


def check_aws_cli(log=print):
    """Exit if the aws binary cannot be run."""
    outcome = run_command_safe(['aws', '--version'], 'Checking AWS CLI...', log=log)
    if not outcome['success']:
        print("Error: AWS CLI is not installed or not available in PATH", file=sys.stderr)
        print("Please install AWS CLI: https://docs.aws.amazon.com/cli/latest/userguide/getting-started-install.html",
              file=sys.stderr)
        sys.exit(1)
    log('AWS CLI is installed and available')


def check_aws_credentials(session, log=print):
    """Exit unless STS can resolve the caller identity. Returns the account id."""
    try:
        identity = session.client('sts').get_caller_identity()
    except (BotoCoreError, ClientError) as e:
        print("Error: AWS credentials are not configured", file=sys.stderr)
        print(f"Details: {e}", file=sys.stderr)
        print("Please configure AWS credentials using: aws configure", file=sys.stderr)
        sys.exit(1)
    account = identity.get('Account')
    log(f"AWS credentials are configured (account {account})")
    return account
