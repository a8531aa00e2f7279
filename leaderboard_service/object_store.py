import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from leaderboard_service.config import AWS_REGION, STORE_BACKEND
from leaderboard_service.errors import BlobNotFound, StoreError

logger = logging.getLogger(__name__)

_MISSING_CODES = {"NoSuchKey", "NotFound", "404"}


class ObjectStore(ABC):
    @abstractmethod
    def get(self, bucket: str, key: str) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def put(self, bucket: str, key: str, body: bytes, content_type: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, bucket: str, key: str) -> None:
        raise NotImplementedError


class S3ObjectStore(ObjectStore):
    def __init__(self, client=None, region_name: Optional[str] = None):
        self.client = client or boto3.client("s3", region_name=region_name)

    def get(self, bucket, key):
        try:
            resp = self.client.get_object(Bucket=bucket, Key=key)
            return resp["Body"].read()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in _MISSING_CODES:
                raise BlobNotFound(f"s3://{bucket}/{key} does not exist") from e
            raise StoreError(f"get s3://{bucket}/{key} failed: {e}") from e
        except BotoCoreError as e:
            raise StoreError(f"get s3://{bucket}/{key} failed: {e}") from e

    def put(self, bucket, key, body, content_type):
        try:
            self.client.put_object(Bucket=bucket, Key=key, Body=body, ContentType=content_type)
        except (ClientError, BotoCoreError) as e:
            raise StoreError(f"put s3://{bucket}/{key} failed: {e}") from e

    def delete(self, bucket, key):
        try:
            self.client.delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise StoreError(f"delete s3://{bucket}/{key} failed: {e}") from e


class MemoryObjectStore(ObjectStore):
    """Process-local blobs, for local runs without AWS and for tests."""

    def __init__(self):
        self.blobs: Dict[Tuple[str, str], bytes] = {}
        self.content_types: Dict[Tuple[str, str], str] = {}

    def get(self, bucket, key):
        try:
            return self.blobs[(bucket, key)]
        except KeyError:
            raise BlobNotFound(f"memory://{bucket}/{key} does not exist") from None

    def put(self, bucket, key, body, content_type):
        self.blobs[(bucket, key)] = bytes(body)
        self.content_types[(bucket, key)] = content_type

    def delete(self, bucket, key):
        # S3 treats deleting a missing key as success
        self.blobs.pop((bucket, key), None)
        self.content_types.pop((bucket, key), None)


def build_object_store(backend: str = STORE_BACKEND, region_name: Optional[str] = AWS_REGION) -> ObjectStore:
    backend = (backend or "s3").lower()
    if backend == "memory":
        logger.warning("Using in-memory object store; the leaderboard will not survive a restart")
        return MemoryObjectStore()
    if backend == "s3":
        return S3ObjectStore(region_name=region_name)
    raise ValueError(f"unknown STORE_BACKEND: {backend!r} (expected 's3' or 'memory')")
