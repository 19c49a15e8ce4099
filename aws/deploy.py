#!/usr/bin/env python3
"""
Deploy orchestrator: create or update the CloudFormation stack, then cache
its outputs in outputs.json.
"""
import os
import sys

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from . import preflight, stack
from .config import validate_trust_accounts
from .utils import call_safe, is_no_updates


def log(message):
    print(f"[DEPLOY] {message}")


def deploy_stack(options, store, session=None):
    """
    Create or update the stack described by options and persist its outputs.

    options: resolved deploy options (see config.resolve_deploy_options)
    store: outputs store that receives the stack outputs
    session: boto3 session; one is built from options when omitted

    Returns the list of stack outputs that was written.
    """
    stack_name = options['stack_name']
    template_file = options['template']

    validate_trust_accounts(options)

    log(f"Deploying stack: {stack_name}")
    log(f"Using bucket name: {options['bucket_name']}")
    log(f"Using trust accounts: {options['trust_account_one']}, {options['trust_account_two']}")
    log(f"Using region: {options['region']}")
    log(f"Using template: {template_file}")

    if not os.path.isfile(template_file):
        print(f"Error: Template file not found: {template_file}", file=sys.stderr)
        sys.exit(1)

    if session is None:
        session = boto3.Session(profile_name=options.get('profile'), region_name=options['region'])

    preflight.check_aws_cli(log=log)
    preflight.check_aws_credentials(session, log=log)

    cfn_client = session.client('cloudformation')
    exists = stack.stack_exists(cfn_client, stack_name)
    operation = 'update' if exists else 'create'

    kwargs = {
        'StackName': stack_name,
        'TemplateBody': stack.read_template(template_file),
        'Parameters': stack.build_parameters(options),
        'Capabilities': stack.CAPABILITIES,
    }
    fn = cfn_client.update_stack if exists else cfn_client.create_stack
    description = 'Updating CloudFormation stack...' if exists else 'Creating CloudFormation stack...'
    outcome = call_safe(fn, description, log=log, **kwargs)

    if outcome['success']:
        stack.wait_for_stack(cfn_client, stack_name, f"stack_{operation}_complete", log=log)
        log('Stack deployment completed successfully!')
    elif is_no_updates(outcome):
        log('Stack is already up to date, no updates to perform')
    else:
        print(f"Error: Failed to {operation} stack {stack_name}: {outcome['error']}", file=sys.stderr)
        if outcome.get('stderr'):
            print(f"STDERR: {outcome['stderr']}", file=sys.stderr)
        sys.exit(1)

    log('Getting stack outputs...')
    try:
        outputs = stack.get_stack_outputs(cfn_client, stack_name)
        store.write(outputs)
    except (BotoCoreError, ClientError, OSError, TypeError, ValueError) as e:
        # The stack change already happened; only the local record is missing
        print(f"Error: Failed to save stack outputs to {store.path}: {e}", file=sys.stderr)
        sys.exit(1)
    log(f"Saved stack outputs to {store.path}")

    print("\nStack Outputs:")
    print(stack.format_outputs(outputs))
    print()
    return outputs


def print_tips():
    log('Deployment completed successfully!')
    log('')
    log('Tips:')
    log('- Set BUCKET_NAME environment variable to customize bucket name')
    log('- Ensure your AWS region is set correctly (AWS_DEFAULT_REGION)')
    log('- The trust role ARN is now available in the stack outputs')
    log('- Run "s3-mcp seed" to upload the sample files to the bucket')
