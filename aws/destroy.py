#!/usr/bin/env python3
"""
Teardown the stack: empty the bucket, delete the stack, drop outputs.json.
"""
import sys

import boto3

from s3 import s3_bucket
from . import preflight, stack
from .utils import call_safe


CONSEQUENCES = [
    'All objects in the S3 bucket',
    'The CloudFormation stack and all its resources',
    'The IAM role and policies',
    'The S3 bucket itself',
]


def log(message):
    print(f"[TEARDOWN] {message}")


def confirm_teardown(options, input_fn=input):
    """Return True if the user typed 'yes' (or --force was given)."""
    if options.get('force'):
        return True

    print("\nWARNING: This will permanently delete:")
    for line in CONSEQUENCES:
        print(f"   - {line}")
    print("\nThis action cannot be undone!")

    try:
        answer = input_fn('\nAre you sure you want to continue? (type "yes" to confirm): ').strip().lower()
    except EOFError:
        answer = ''
    return answer == 'yes'


def delete_stack(cfn_client, stack_name):
    log(f"Deleting CloudFormation stack: {stack_name}")
    outcome = call_safe(cfn_client.delete_stack, 'Initiating stack deletion...', log=log, StackName=stack_name)
    if not outcome['success']:
        print(f"Error deleting stack: {outcome['error']}", file=sys.stderr)
        if outcome.get('stderr'):
            print(f"STDERR: {outcome['stderr']}", file=sys.stderr)
        sys.exit(1)

    stack.wait_for_stack(cfn_client, stack_name, 'stack_delete_complete', log=log)
    log('CloudFormation stack deleted successfully')


def cleanup_outputs(store):
    try:
        if store.delete():
            log(f"Cleaned up {store.path}")
    except OSError as e:
        print(f"Error cleaning up outputs file: {e}", file=sys.stderr)


def teardown(options, store, session=None):
    """
    Remove everything the deploy created. Returns False when there was no
    stack to delete, True once the stack is gone.
    """
    outputs = store.read()
    bucket_name = outputs.get('BucketName')
    region = options['region']
    stack_name = options['stack_name']

    if not bucket_name:
        print(f"Error: Could not determine bucket name from {store.path}", file=sys.stderr)
        print("Please ensure the stack was deployed successfully", file=sys.stderr)
        sys.exit(1)

    log(f"Starting teardown for stack: {stack_name}")
    log(f"Using bucket name: {bucket_name}")
    log(f"Using region: {region}")

    if session is None:
        session = boto3.Session(profile_name=options.get('profile'), region_name=region)
    cfn_client = session.client('cloudformation')

    if not stack.stack_exists(cfn_client, stack_name):
        log('Stack does not exist, nothing to teardown')
        return False

    # A versioned, non-empty bucket would make the stack deletion fail
    s3_bucket.empty_bucket(session.client('s3'), bucket_name, log=log)

    delete_stack(cfn_client, stack_name)
    cleanup_outputs(store)

    log('Teardown completed successfully!')
    return True


def run_teardown(options, store, session=None, input_fn=input):
    """Preflight, confirm, then teardown. Returns the process exit code."""
    log('Starting S3 MCP infrastructure teardown...')

    if session is None:
        session = boto3.Session(profile_name=options.get('profile'), region_name=options['region'])

    preflight.check_aws_cli(log=log)
    preflight.check_aws_credentials(session, log=log)

    if not confirm_teardown(options, input_fn=input_fn):
        log('Teardown cancelled by user')
        return 0

    teardown(options, store, session=session)
    return 0
