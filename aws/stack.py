#!/usr/bin/env python3
"""
CloudFormation stack operations.
"""
import sys

from botocore.exceptions import BotoCoreError, ClientError, WaiterError


CAPABILITIES = ['CAPABILITY_NAMED_IAM']


def stack_exists(cfn_client, stack_name):
    """Return True if the stack can be described."""
    try:
        cfn_client.describe_stacks(StackName=stack_name)
        return True
    except ClientError as e:
        error = e.response['Error']
        if error['Code'] == 'ValidationError' and 'does not exist' in error.get('Message', ''):
            return False
        print(f"Error checking stack {stack_name}: {e}", file=sys.stderr)
        sys.exit(1)
    except BotoCoreError as e:
        print(f"Error checking stack {stack_name}: {e}", file=sys.stderr)
        sys.exit(1)


def read_template(template_file):
    try:
        with open(template_file, 'r') as f:
            return f.read()
    except OSError as e:
        print(f"Error: Cannot read template {template_file}: {e}", file=sys.stderr)
        sys.exit(1)


def build_parameters(options):
    return [
        {'ParameterKey': 'YourBucketName', 'ParameterValue': options['bucket_name']},
        {'ParameterKey': 'TrustAccountOne', 'ParameterValue': options['trust_account_one']},
        {'ParameterKey': 'TrustAccountTwo', 'ParameterValue': options['trust_account_two']},
    ]


def wait_for_stack(cfn_client, stack_name, waiter_name, log=print):
    """Block until the waiter succeeds; exit if the stack ends in a failed state."""
    log(f"Waiting for {waiter_name.replace('_', '-')} on {stack_name}...")
    try:
        cfn_client.get_waiter(waiter_name).wait(StackName=stack_name)
    except WaiterError as e:
        print(f"Error: stack {stack_name} did not reach the expected state: {e}", file=sys.stderr)
        sys.exit(1)


def get_stack_outputs(cfn_client, stack_name):
    """Return the stack's Outputs list as returned by DescribeStacks."""
    response = cfn_client.describe_stacks(StackName=stack_name)
    stacks = response.get('Stacks', [])
    if not stacks:
        return []
    return stacks[0].get('Outputs', [])


def format_outputs(outputs):
    """Render outputs as a two column table."""
    if not outputs:
        return '  (no outputs)'
    width = max(len(o['OutputKey']) for o in outputs)
    return '\n'.join(f"  {o['OutputKey'].ljust(width)}  {o['OutputValue']}" for o in outputs)
