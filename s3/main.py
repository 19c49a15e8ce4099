#!/usr/bin/env python3
"""
CLI entry point for uploading seed files to the stack bucket.
"""
import re
import sys

from aws.outputs import OutputsStore
from . import seed


BUCKET_NAME_PATTERN = re.compile(r'^[a-z0-9][a-z0-9-]{1,61}[a-z0-9]$')


def print_usage():
    print("Usage: s3-mcp seed <bucket-name>", file=sys.stderr)
    print("", file=sys.stderr)
    print("Example: s3-mcp seed my-s3-bucket", file=sys.stderr)
    print("", file=sys.stderr)
    print("Required environment variables:", file=sys.stderr)
    print("- AWS_ACCESS_KEY_ID", file=sys.stderr)
    print("- AWS_SECRET_ACCESS_KEY", file=sys.stderr)
    print("- AWS_REGION (optional, defaults to us-east-1)", file=sys.stderr)


def main(args, env=None, s3_client=None):
    """
    Upload seed files. The bucket comes from the positional argument or,
    failing that, from BucketName in outputs.json.
    """
    outputs = OutputsStore(args.outputs).read()
    bucket_name = args.bucket_name or outputs.get('BucketName')

    if not bucket_name:
        print("Error: Bucket name is required", file=sys.stderr)
        print("", file=sys.stderr)
        print_usage()
        return 1

    if not BUCKET_NAME_PATTERN.match(bucket_name):
        print("Error: Invalid bucket name format", file=sys.stderr)
        print("Bucket names must be 3-63 characters long and contain only lowercase letters, numbers, and hyphens",
              file=sys.stderr)
        return 1

    return seed.upload_seed(bucket_name, outputs, seed_dir=args.seed_dir, s3_client=s3_client, env=env)
