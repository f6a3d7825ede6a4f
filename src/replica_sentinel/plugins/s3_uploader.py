"""S3 artifact uploader — boto3 client built from injected settings."""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from replica_sentinel.errors import UploadError
from replica_sentinel.plugins.contracts.uploader import ArtifactUploader

logger = logging.getLogger(__name__)


class S3ArtifactUploader(ArtifactUploader):
    """Uploads to S3 or an S3-compatible endpoint.

    The boto3 client is created on first use so that constructing the
    uploader at startup never touches the network.
    """

    def __init__(
        self,
        *,
        access_key: str,
        secret_key: str,
        region: str = "",
        endpoint_url: str = "",
        client: Any = None,
    ) -> None:
        self._access_key = access_key
        self._secret_key = secret_key
        self._region = region
        self._endpoint_url = endpoint_url
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = boto3.client(
                "s3",
                aws_access_key_id=self._access_key or None,
                aws_secret_access_key=self._secret_key or None,
                region_name=self._region or None,
                endpoint_url=self._endpoint_url or None,
            )
        return self._client

    def upload_artifact(self, bucket: str, key: str, content: bytes) -> None:
        try:
            self._get_client().put_object(Bucket=bucket, Key=key, Body=content)
        except (BotoCoreError, ClientError) as error:
            raise UploadError(
                f"Unable to upload [{key}] to [{bucket}], [{error}]"
            ) from error
        logger.info("Uploaded %s bytes to s3://%s/%s", len(content), bucket, key)
