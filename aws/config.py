#!/usr/bin/env python3
"""
Configuration loading and option resolution.

Every option is resolved in this order:
explicit flag > environment variable > YAML config file > outputs.json > default
"""
import os
import sys

import yaml


STACK_NAME = 's3-mcp-infrastructure'
TEMPLATE_FILE = 'stack.yml'
DEFAULT_REGION = 'us-east-1'
DEFAULT_BUCKET_NAME = 's3-mcp-bucket'

# option -> (environment variable, outputs.json key, default)
DEPLOY_OPTIONS = {
    'region': ('AWS_DEFAULT_REGION', 'Region', DEFAULT_REGION),
    'bucket_name': ('BUCKET_NAME', 'BucketName', DEFAULT_BUCKET_NAME),
    'trust_account_one': ('TRUST_ACCOUNT_ONE', 'TrustAccountOne', ''),
    'trust_account_two': ('TRUST_ACCOUNT_TWO', 'TrustAccountTwo', ''),
}

TEARDOWN_OPTIONS = {
    'region': DEPLOY_OPTIONS['region'],
}

TRUST_POLICY_EXAMPLE = """{
  "Version": "2012-10-17",
  "Statement": [
    {
      "Effect": "Allow",
      "Principal": {
        "AWS": [
          "arn:aws:iam::<TRUST_ACCOUNT_ONE>:root",
          "arn:aws:iam::<TRUST_ACCOUNT_TWO>:root"
        ]
      },
      "Action": "sts:AssumeRole"
    }
  ]
}"""


def load_config(config_file):
    """
    Load optional YAML configuration.

    Returns a flat dict using the same keys as the command line options.
    """
    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        print(f"Error loading configuration: {str(e)}", file=sys.stderr)
        sys.exit(1)

    if not isinstance(config, dict):
        print(f"Error: configuration file '{config_file}' must contain a mapping", file=sys.stderr)
        sys.exit(1)

    aws_config = config.get('aws') or {}
    stack_config = config.get('stack') or {}
    trust_accounts = stack_config.get('trust_accounts') or []
    if not isinstance(trust_accounts, list) or len(trust_accounts) > 2:
        print("Error: 'stack.trust_accounts' must be a list of at most two account ids", file=sys.stderr)
        sys.exit(1)

    result = {
        'region': aws_config.get('region'),
        'profile': aws_config.get('profile'),
        'stack_name': stack_config.get('name'),
        'template': stack_config.get('template'),
        'bucket_name': stack_config.get('bucket_name'),
    }
    if len(trust_accounts) > 0:
        result['trust_account_one'] = str(trust_accounts[0])
    if len(trust_accounts) > 1:
        result['trust_account_two'] = str(trust_accounts[1])

    # Relative template paths are relative to the config file
    template = result.get('template')
    if template and not os.path.isabs(template):
        result['template'] = os.path.join(os.path.dirname(os.path.abspath(config_file)), template)

    return {k: v for k, v in result.items() if v is not None}


def resolve_option(name, flag_value, env, file_config, outputs, table):
    env_var, output_key, default = table[name]
    for value in (flag_value, env.get(env_var), file_config.get(name), outputs.get(output_key)):
        if value:
            return value
    return default


def _resolve(table, args, env, file_config, outputs):
    env = os.environ if env is None else env
    file_config = file_config or {}
    outputs = outputs or {}
    options = {}
    for name in table:
        options[name] = resolve_option(name, args.get(name), env, file_config, outputs, table)
    options['stack_name'] = args.get('stack_name') or file_config.get('stack_name') or STACK_NAME
    options['profile'] = args.get('profile') or file_config.get('profile')
    return options


def resolve_deploy_options(args, env=None, file_config=None, outputs=None):
    """
    Resolve deploy options from parsed arguments (a dict), the environment,
    the YAML config and the previously persisted outputs.
    """
    options = _resolve(DEPLOY_OPTIONS, args, env, file_config, outputs)
    options['template'] = (args.get('template') or (file_config or {}).get('template')
                           or os.path.join(os.getcwd(), TEMPLATE_FILE))
    return options


def resolve_teardown_options(args, env=None, file_config=None, outputs=None):
    options = _resolve(TEARDOWN_OPTIONS, args, env, file_config, outputs)
    options['force'] = bool(args.get('force'))
    return options


def validate_trust_accounts(options):
    """Exit with an example trust policy unless both trust accounts are set."""
    missing = [name for name in ('trust_account_one', 'trust_account_two') if not options.get(name)]
    if not missing:
        return

    print("Error: Both trust account IDs are required", file=sys.stderr)
    print(f"Missing: {', '.join(missing)}", file=sys.stderr)
    print("", file=sys.stderr)
    print("The stack creates an IAM role with a trust policy like:", file=sys.stderr)
    print(TRUST_POLICY_EXAMPLE, file=sys.stderr)
    print("", file=sys.stderr)
    print("Example:", file=sys.stderr)
    print("  s3-mcp deploy --trust-account-one 111111111111 --trust-account-two 222222222222", file=sys.stderr)
    print("or set TRUST_ACCOUNT_ONE and TRUST_ACCOUNT_TWO in the environment.", file=sys.stderr)
    sys.exit(1)
