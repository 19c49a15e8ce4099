#!/usr/bin/env python3
"""
S3 bucket access checks, seed file upload and bucket emptying.
"""
import datetime
import math
import os

from botocore.exceptions import BotoCoreError, ClientError


CONTENT_TYPES = {
    '.csv': 'text/csv',
    '.json': 'application/json',
    '.txt': 'text/plain',
    '.pdf': 'application/pdf',
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.xml': 'application/xml',
}
DEFAULT_CONTENT_TYPE = 'application/octet-stream'


class BucketAccessError(Exception):
    """The target bucket is missing or not accessible."""


def get_content_type(file_name):
    ext = os.path.splitext(file_name)[1].lower()
    return CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


def format_bytes(size):
    """Format a byte count as e.g. '1.5 KB'."""
    units = ['Bytes', 'KB', 'MB', 'GB']
    i = 0
    while size >= math.pow(1024, i + 1) and i < len(units) - 1:
        i += 1
    value = round(size / math.pow(1024, i), 2)
    if value == int(value):
        value = int(value)
    return f"{value} {units[i]}"


def check_bucket_access(s3_client, bucket_name):
    """
    Check the bucket with a one-key listing.
    Raises BucketAccessError describing why the bucket cannot be used.
    """
    try:
        s3_client.list_objects_v2(Bucket=bucket_name, MaxKeys=1)
    except ClientError as e:
        code = e.response['Error']['Code']
        if code == 'NoSuchBucket':
            raise BucketAccessError(f"Bucket '{bucket_name}' does not exist")
        if code == 'AccessDenied':
            raise BucketAccessError(
                f"Access denied to bucket '{bucket_name}'. Check your AWS credentials and permissions.")
        raise BucketAccessError(f"Cannot access bucket '{bucket_name}': {e.response['Error'].get('Message', e)}")
    except BotoCoreError as e:
        raise BucketAccessError(f"Cannot access bucket '{bucket_name}': {e}")
    return True


def get_files_from_directory(directory):
    """
    Return descriptors for the regular files directly inside directory:
    [{'local_path', 'file_name', 'size'}, ...] sorted by file name.
    """
    try:
        names = sorted(os.listdir(directory))
        files = []
        for name in names:
            local_path = os.path.join(directory, name)
            if os.path.isfile(local_path):
                files.append({
                    'local_path': local_path,
                    'file_name': name,
                    'size': os.path.getsize(local_path),
                })
        return files
    except OSError as e:
        raise OSError(f"Failed to read directory {directory}: {e}") from e


def upload_file_to_s3(s3_client, bucket_name, file):
    """Upload one seed file. Never raises; returns an upload result dict."""
    try:
        print(f"📤 Uploading {file['file_name']} ({format_bytes(file['size'])})...")
        with open(file['local_path'], 'rb') as f:
            body = f.read()

        response = s3_client.put_object(
            Bucket=bucket_name,
            Key=file['file_name'],
            Body=body,
            ContentType=get_content_type(file['file_name']),
            Metadata={
                'upload-date': datetime.datetime.now(datetime.timezone.utc).isoformat(),
                'original-size': str(file['size']),
            },
        )

        print(f"✅ Successfully uploaded {file['file_name']}")
        return {
            'file_name': file['file_name'],
            'success': True,
            'etag': response.get('ETag'),
            'size': file['size'],
        }
    except Exception as e:
        print(f"❌ Failed to upload {file['file_name']}: {e}")
        return {
            'file_name': file['file_name'],
            'success': False,
            'error': str(e),
            'size': file['size'],
        }


def empty_bucket(s3_client, bucket_name, log=print):
    """
    Delete every object version and delete marker in the bucket.

    Uses a single ListObjectVersions call. A failed listing means the bucket
    is treated as already empty. Returns the number of entries deleted.
    """
    log(f"Clearing S3 bucket: {bucket_name}")
    log('Listing all object versions and delete markers...')
    try:
        listing = s3_client.list_object_versions(Bucket=bucket_name)
    except (ClientError, BotoCoreError) as e:
        log(f"Bucket appears to be empty or does not exist ({e})")
        return 0

    versions = listing.get('Versions', [])
    delete_markers = listing.get('DeleteMarkers', [])
    if not versions and not delete_markers:
        log('Bucket is already empty')
        return 0

    log(f"Found {len(versions)} object version(s) and {len(delete_markers)} delete marker(s) to remove")

    deleted = 0
    for kind, entries in (('version', versions), ('delete marker', delete_markers)):
        for entry in entries:
            log(f"Deleting {kind}: {entry['Key']} ({entry['VersionId']})")
            try:
                s3_client.delete_object(Bucket=bucket_name, Key=entry['Key'], VersionId=entry['VersionId'])
                deleted += 1
            except (ClientError, BotoCoreError) as e:
                log(f"Warning: could not delete {entry['Key']} ({entry['VersionId']}): {e}")

    log('S3 bucket cleared successfully')
    return deleted
