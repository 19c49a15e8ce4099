#!/usr/bin/env python3
"""
CLI entry points for stack deploy and teardown.
"""
from . import config, deploy, destroy
from .outputs import OutputsStore


def _file_config(args):
    if getattr(args, 'config', None):
        return config.load_config(args.config)
    return {}


def deploy_main(args, env=None, session=None):
    """
    Deploy the stack using parsed command line arguments.

    Args:
        args: argparse namespace with region, bucket_name, trust_account_one,
              trust_account_two, stack_name, template, profile, config, outputs
        env: environment mapping, os.environ when None
        session: optional boto3 session (tests pass a mock)
    """
    store = OutputsStore(args.outputs)
    options = config.resolve_deploy_options(
        vars(args), env=env, file_config=_file_config(args), outputs=store.read())

    deploy.log('Starting S3 MCP infrastructure deployment...')
    deploy.deploy_stack(options, store, session=session)
    deploy.print_tips()
    return 0


def teardown_main(args, env=None, session=None, input_fn=input):
    store = OutputsStore(args.outputs)
    options = config.resolve_teardown_options(
        vars(args), env=env, file_config=_file_config(args), outputs=store.read())
    return destroy.run_teardown(options, store, session=session, input_fn=input_fn)
