#!/usr/bin/env python3
"""
Manage the S3 MCP infrastructure stack.

  deploy    create or update the CloudFormation stack and cache its outputs
  seed      upload the files in ./seed to the stack's bucket
  teardown  empty the bucket, delete the stack and remove outputs.json
"""
import argparse
import sys


def build_parser():
    parser = argparse.ArgumentParser(description="Deploy, seed and tear down the S3 MCP infrastructure stack")
    sub = parser.add_subparsers(dest="command", metavar="{deploy,seed,teardown}")
    sub.required = True

    p = sub.add_parser("deploy", help="Create or update the CloudFormation stack")
    p.add_argument("--region", help="AWS region (env: AWS_DEFAULT_REGION, default: us-east-1)")
    p.add_argument("--bucket-name", help="S3 bucket name (env: BUCKET_NAME, default: s3-mcp-bucket)")
    p.add_argument("--trust-account-one", help="First AWS account ID allowed to assume the role (env: TRUST_ACCOUNT_ONE)")
    p.add_argument("--trust-account-two", help="Second AWS account ID allowed to assume the role (env: TRUST_ACCOUNT_TWO)")
    p.add_argument("--stack-name", help="CloudFormation stack name (default: s3-mcp-infrastructure)")
    p.add_argument("--template", help="CloudFormation template file (default: ./stack.yml)")
    p.add_argument("--config", "-c", help="Optional YAML config")
    p.add_argument("--profile", help="AWS profile")
    p.add_argument("--outputs", help="Outputs file (default: ./outputs.json)")

    p = sub.add_parser("teardown", help="Empty the bucket and delete the stack")
    p.add_argument("--region", help="AWS region (env: AWS_DEFAULT_REGION, default: us-east-1)")
    p.add_argument("--force", "-f", action="store_true", help="Skip confirmation prompts")
    p.add_argument("--stack-name", help="CloudFormation stack name (default: s3-mcp-infrastructure)")
    p.add_argument("--config", "-c", help="Optional YAML config")
    p.add_argument("--profile", help="AWS profile")
    p.add_argument("--outputs", help="Outputs file (default: ./outputs.json)")

    p = sub.add_parser("seed", help="Upload seed files to the bucket")
    p.add_argument("bucket_name", nargs="?", help="Target bucket (default: BucketName from outputs.json)")
    p.add_argument("--seed-dir", help="Directory of files to upload (default: ./seed)")
    p.add_argument("--outputs", help="Outputs file (default: ./outputs.json)")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.command == "seed":
        from s3.main import main as seed_main
        return seed_main(args)

    from aws.main import deploy_main, teardown_main
    if args.command == "deploy":
        return deploy_main(args)
    return teardown_main(args)


if __name__ == "__main__":
    sys.exit(main())
