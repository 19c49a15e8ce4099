#!/usr/bin/env python3
"""
Upload every file in the seed directory to the stack's S3 bucket.
"""
import os
import sys

import boto3
from botocore.exceptions import BotoCoreError

from . import s3_bucket
from .s3_bucket import BucketAccessError, format_bytes


SEED_DIRECTORY = 'seed'
DEFAULT_REGION = 'us-east-1'


def resolve_region(outputs, env=None):
    env = os.environ if env is None else env
    return env.get('AWS_REGION') or outputs.get('Region') or DEFAULT_REGION


def create_s3_client(region, env=None):
    """
    Build an S3 client for region. Credentials from the environment are
    passed explicitly when both key id and secret are set.
    """
    env = os.environ if env is None else env
    session_kwargs = {'region_name': region}
    if env.get('AWS_ACCESS_KEY_ID') and env.get('AWS_SECRET_ACCESS_KEY'):
        session_kwargs['aws_access_key_id'] = env['AWS_ACCESS_KEY_ID']
        session_kwargs['aws_secret_access_key'] = env['AWS_SECRET_ACCESS_KEY']
        # Required for SSO / temporary credentials
        if env.get('AWS_SESSION_TOKEN'):
            session_kwargs['aws_session_token'] = env['AWS_SESSION_TOKEN']
    return boto3.Session(**session_kwargs).client('s3')


def upload_files(s3_client, bucket_name, files):
    """Upload files one at a time; returns one result per file."""
    results = []
    for file in files:
        results.append(s3_bucket.upload_file_to_s3(s3_client, bucket_name, file))
    return results


def print_summary(results):
    """Print the upload summary. Returns the number of failed uploads."""
    successful = [r for r in results if r['success']]
    failed = [r for r in results if not r['success']]

    print('')
    print('📊 Upload Summary:')
    print('==================')

    if successful:
        total_size = sum(r['size'] for r in successful)
        print(f"✅ Successful uploads: {len(successful)}")
        print(f"📈 Total uploaded: {format_bytes(total_size)}")
        print('')
        print('Successfully uploaded files:')
        for r in successful:
            print(f"   ✅ {r['file_name']} - ETag: {r['etag']}")

    if failed:
        print('')
        print('❌ Failed uploads:')
        for r in failed:
            print(f"   ❌ {r['file_name']} - Error: {r['error']}")

    print('')
    if not failed:
        print('🎉 All files uploaded successfully!')
    else:
        print('⚠️  Some uploads failed. Check the errors above.')
    return len(failed)


def _print_fatal(error):
    print(f"💥 Script failed: {error}", file=sys.stderr)
    print('', file=sys.stderr)
    print('Common solutions:', file=sys.stderr)
    print('1. Check your AWS credentials are set correctly', file=sys.stderr)
    print('2. Verify the bucket name exists and you have access', file=sys.stderr)
    print('3. Ensure AWS_REGION is set if using a non-default region', file=sys.stderr)
    print('4. Check that the seed directory contains files', file=sys.stderr)


def upload_seed(bucket_name, outputs, seed_dir=None, s3_client=None, env=None):
    """
    Upload the seed directory to bucket_name.

    Returns the process exit code: 0 when every file uploaded (or there was
    nothing to upload), 1 otherwise.
    """
    seed_dir = seed_dir or os.path.join(os.getcwd(), SEED_DIRECTORY)
    region = resolve_region(outputs, env)

    print('🚀 S3 Upload Script Starting...')
    print(f"📁 Source directory: {seed_dir}")
    print(f"🪣 Target bucket: {bucket_name}")
    print(f"🌍 Region: {region}")
    print('')

    try:
        if s3_client is None:
            s3_client = create_s3_client(region, env)

        print('🔍 Checking bucket access...')
        s3_bucket.check_bucket_access(s3_client, bucket_name)
        print('✅ Bucket is accessible')
        print('')

        print('📂 Scanning seed directory...')
        files = s3_bucket.get_files_from_directory(seed_dir)
    except (BucketAccessError, BotoCoreError, OSError) as e:
        _print_fatal(e)
        return 1

    if not files:
        print('⚠️  No files found in seed directory')
        return 0

    print(f"📋 Found {len(files)} files to upload:")
    for file in files:
        print(f"   - {file['file_name']} ({format_bytes(file['size'])})")
    print('')

    print('📤 Starting uploads...')
    results = upload_files(s3_client, bucket_name, files)
    failed = print_summary(results)
    return 0 if failed == 0 else 1
