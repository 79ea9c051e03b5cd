"""S3 object fetch backend implementing IFileStore."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from productsync.core.exceptions import FetchError


class S3FileStore:
    """Production IFileStore reading objects from one S3 bucket."""

    def __init__(self, bucket: str, region: str = "us-west-2",
                 endpoint_url: str | None = None, client: Any = None) -> None:
        self._bucket = bucket
        self._region = region
        self._endpoint_url = endpoint_url
        if client is None:
            kwargs: dict = {"region_name": region}
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            client = boto3.client("s3", **kwargs)
        self._client = client

    @property
    def bucket(self) -> str:
        return self._bucket

    def read(self, key: str) -> bytes:
        try:
            resp = self._client.get_object(Bucket=self._bucket, Key=key)
            body = resp["Body"]
            try:
                return body.read()
            finally:
                body.close()
        except (ClientError, BotoCoreError) as exc:
            raise FetchError(self._bucket, key, str(exc)) from exc


class S3FileStoreFactory:
    """Hands out one S3FileStore per bucket, all sharing a single boto3 client."""

    def __init__(self, region: str = "us-west-2", endpoint_url: str | None = None) -> None:
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._region = region
        self._endpoint_url = endpoint_url
        self._client = boto3.client("s3", **kwargs)
        self._stores: dict[str, S3FileStore] = {}

    def __call__(self, bucket: str) -> S3FileStore:
        store = self._stores.get(bucket)
        if store is None:
            store = S3FileStore(bucket, region=self._region,
                                endpoint_url=self._endpoint_url, client=self._client)
            self._stores[bucket] = store
        return store
