#!/usr/bin/env python3
"""
In-memory mock boto3 clients with the same interface as real AWS clients.
All state is stored in memory for testing without hitting AWS.
"""
import hashlib
from copy import deepcopy

from botocore.exceptions import ClientError, NoCredentialsError


def _client_error(code, message="", operation="Operation"):
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class MockS3Client:
    """In-memory S3 client. State: buckets dict; objects keep every version."""

    def __init__(self, state=None):
        self._buckets = state if state is not None else {}
        self.calls = []

    @property
    def state(self):
        return self._buckets

    def create_bucket(self, Bucket=None, CreateBucketConfiguration=None):
        if Bucket in self._buckets:
            raise _client_error("BucketAlreadyExists", "Bucket already exists")
        self._buckets[Bucket] = {
            "region": CreateBucketConfiguration["LocationConstraint"] if CreateBucketConfiguration else "us-east-1",
            "versions": [],
            "delete_markers": [],
        }
        return {"Location": f"/{Bucket}"}

    def _bucket(self, Bucket, operation):
        if Bucket not in self._buckets:
            raise _client_error("NoSuchBucket", "The specified bucket does not exist", operation)
        return self._buckets[Bucket]

    def put_object(self, Bucket=None, Key=None, Body=b"", ContentType=None, Metadata=None):
        self.calls.append(("put_object", Key))
        bucket = self._bucket(Bucket, "PutObject")
        body = Body if isinstance(Body, bytes) else Body.encode()
        etag = f'"{hashlib.md5(body).hexdigest()}"'
        version_id = f"v{len(bucket['versions']) + len(bucket['delete_markers']) + 1}"
        bucket["versions"].append({
            "Key": Key,
            "VersionId": version_id,
            "Body": body,
            "ContentType": ContentType or "binary/octet-stream",
            "Metadata": dict(Metadata or {}),
            "ETag": etag,
        })
        return {"ETag": etag, "VersionId": version_id}

    def add_delete_marker(self, Bucket, Key):
        bucket = self._bucket(Bucket, "DeleteObject")
        version_id = f"dm{len(bucket['delete_markers']) + 1}"
        bucket["delete_markers"].append({"Key": Key, "VersionId": version_id, "IsLatest": True})
        return version_id

    def list_objects_v2(self, Bucket=None, MaxKeys=1000, **kwargs):
        self.calls.append(("list_objects_v2", Bucket))
        bucket = self._bucket(Bucket, "ListObjectsV2")
        keys = sorted({v["Key"] for v in bucket["versions"]})[:MaxKeys]
        return {"Contents": [{"Key": k} for k in keys], "KeyCount": len(keys), "IsTruncated": False}

    def list_object_versions(self, Bucket=None, **kwargs):
        self.calls.append(("list_object_versions", Bucket))
        bucket = self._bucket(Bucket, "ListObjectVersions")
        response = {"IsTruncated": False}
        if bucket["versions"]:
            response["Versions"] = [{"Key": v["Key"], "VersionId": v["VersionId"]} for v in bucket["versions"]]
        if bucket["delete_markers"]:
            response["DeleteMarkers"] = [{"Key": m["Key"], "VersionId": m["VersionId"]} for m in bucket["delete_markers"]]
        return response

    def delete_object(self, Bucket=None, Key=None, VersionId=None):
        self.calls.append(("delete_object", Key, VersionId))
        bucket = self._bucket(Bucket, "DeleteObject")
        for entries in (bucket["versions"], bucket["delete_markers"]):
            for entry in list(entries):
                if entry["Key"] == Key and entry["VersionId"] == VersionId:
                    entries.remove(entry)
        return {}

    def delete_bucket(self, Bucket=None):
        bucket = self._bucket(Bucket, "DeleteBucket")
        if bucket["versions"] or bucket["delete_markers"]:
            raise _client_error("BucketNotEmpty", "The bucket you tried to delete is not empty")
        del self._buckets[Bucket]
        return {}


class MockWaiter:
    """Records waits; completes immediately."""

    def __init__(self, name, log):
        self.name = name
        self._log = log

    def wait(self, **kwargs):
        self._log.append((self.name, kwargs.get("StackName")))


class MockCloudFormationClient:
    """
    In-memory CloudFormation client. State: stacks dict by name, plus the
    list of waiters that were waited on.

    Outputs are derived from the stack parameters the same way stack.yml
    derives them.
    """

    def __init__(self, state=None, region="us-east-1"):
        state = state if state is not None else {}
        self._stacks = state.setdefault("stacks", {})
        self.waits = state.setdefault("waits", [])
        self.calls = state.setdefault("calls", [])
        self._region = region

    @property
    def state(self):
        return {"stacks": self._stacks, "waits": self.waits, "calls": self.calls}

    def _outputs(self, stack_name, parameters):
        params = {p["ParameterKey"]: p["ParameterValue"] for p in parameters}
        bucket = params.get("YourBucketName", "")
        return [
            {"OutputKey": "BucketName", "OutputValue": bucket, "Description": "Name of the S3 bucket"},
            {"OutputKey": "BucketArn", "OutputValue": f"arn:aws:s3:::{bucket}"},
            {"OutputKey": "Region", "OutputValue": self._region},
            {"OutputKey": "TrustAccountOne", "OutputValue": params.get("TrustAccountOne", "")},
            {"OutputKey": "TrustAccountTwo", "OutputValue": params.get("TrustAccountTwo", "")},
            {"OutputKey": "RoleArn", "OutputValue": f"arn:aws:iam::123456789012:role/{stack_name}-trust-role"},
        ]

    def describe_stacks(self, StackName=None):
        self.calls.append(("describe_stacks", StackName))
        if StackName not in self._stacks:
            raise _client_error("ValidationError", f"Stack with id {StackName} does not exist", "DescribeStacks")
        s = self._stacks[StackName]
        return {"Stacks": [{
            "StackName": StackName,
            "StackStatus": s["StackStatus"],
            "Parameters": deepcopy(s["Parameters"]),
            "Outputs": deepcopy(s["Outputs"]),
        }]}

    def create_stack(self, StackName=None, TemplateBody=None, Parameters=None, Capabilities=None):
        self.calls.append(("create_stack", StackName))
        if StackName in self._stacks:
            raise _client_error("AlreadyExistsException", f"Stack [{StackName}] already exists", "CreateStack")
        self._stacks[StackName] = {
            "StackStatus": "CREATE_COMPLETE",
            "TemplateBody": TemplateBody,
            "Parameters": deepcopy(Parameters or []),
            "Capabilities": list(Capabilities or []),
            "Outputs": self._outputs(StackName, Parameters or []),
        }
        return {"StackId": f"arn:aws:cloudformation:{self._region}:123456789012:stack/{StackName}/1"}

    def update_stack(self, StackName=None, TemplateBody=None, Parameters=None, Capabilities=None):
        self.calls.append(("update_stack", StackName))
        if StackName not in self._stacks:
            raise _client_error("ValidationError", f"Stack [{StackName}] does not exist", "UpdateStack")
        s = self._stacks[StackName]
        if s["TemplateBody"] == TemplateBody and s["Parameters"] == (Parameters or []):
            raise _client_error("ValidationError", "No updates are to be performed.", "UpdateStack")
        s.update({
            "StackStatus": "UPDATE_COMPLETE",
            "TemplateBody": TemplateBody,
            "Parameters": deepcopy(Parameters or []),
            "Outputs": self._outputs(StackName, Parameters or []),
        })
        return {"StackId": f"arn:aws:cloudformation:{self._region}:123456789012:stack/{StackName}/1"}

    def delete_stack(self, StackName=None):
        self.calls.append(("delete_stack", StackName))
        self._stacks.pop(StackName, None)
        return {}

    def get_waiter(self, waiter_name):
        if waiter_name not in ("stack_create_complete", "stack_update_complete", "stack_delete_complete"):
            raise ValueError(f"Unknown waiter: {waiter_name}")
        return MockWaiter(waiter_name, self.waits)


class MockSTSClient:
    """In-memory STS client."""

    def __init__(self, account_id="123456789012", user_id="test-user", arn="arn:aws:iam::123456789012:user/test",
                 credentials=True):
        self._account_id = account_id
        self._user_id = user_id
        self._arn = arn
        self.credentials = credentials

    def get_caller_identity(self):
        if not self.credentials:
            raise NoCredentialsError()
        return {"Account": self._account_id, "UserId": self._user_id, "Arn": self._arn}


class MockSession:
    """Mock boto3.Session that returns in-memory clients. State is shared per service type."""

    def __init__(self, profile_name=None, region_name=None, **kwargs):
        self.profile_name = profile_name
        self.region_name = region_name
        self.kwargs = kwargs
        self._s3_state = {}
        self._cloudformation_state = {}
        self._sts = MockSTSClient()

    def client(self, service_name, region_name=None):
        region = region_name or self.region_name or "us-east-1"
        if service_name == "s3":
            return MockS3Client(self._s3_state)
        if service_name == "cloudformation":
            return MockCloudFormationClient(self._cloudformation_state, region=region)
        if service_name == "sts":
            return self._sts
        raise ValueError(f"Unknown service: {service_name}")

    def reset(self):
        self._s3_state.clear()
        self._cloudformation_state.clear()

    def seed_stack(self, stack_name, parameters, template_body="", region=None):
        """Pre-create a stack for tests."""
        client = MockCloudFormationClient(self._cloudformation_state, region=region or self.region_name or "us-east-1")
        client.create_stack(StackName=stack_name, TemplateBody=template_body, Parameters=parameters)
        self._cloudformation_state["calls"].clear()

    def seed_bucket(self, bucket_name, keys=(), delete_markers=()):
        """Create a bucket holding one version per key, plus delete markers."""
        client = MockS3Client(self._s3_state)
        client.create_bucket(Bucket=bucket_name)
        for key in keys:
            client.put_object(Bucket=bucket_name, Key=key, Body=key.encode())
        for key in delete_markers:
            client.add_delete_marker(bucket_name, key)
        return client
