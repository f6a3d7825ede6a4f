"""Manifest resource — upload a group manifest to object storage."""

from __future__ import annotations

import asyncio

from replica_sentinel.errors import UploadError
from replica_sentinel.services.manifest_service import ManifestService


class ManifestRejectedError(Exception):
    """Raised when the request is invalid for the group's current state."""


class ManifestUploadFailedError(Exception):
    """Raised when the object store refused the manifest."""


class ManifestResource:
    """Built once at startup with the service pre-wired."""

    _FIELDS = ("group_id", "term_id", "s3_bucket", "s3_path", "content")

    def __init__(self, manifest_service: ManifestService) -> None:
        self._service = manifest_service

    async def upload(self, data: dict[str, object]) -> dict[str, str]:
        """Validate the body and upload off the event loop.

        Raises:
            ManifestRejectedError: Malformed body, bad group, or stale term.
            ManifestUploadFailedError: The upload itself failed.
        """
        missing = [name for name in self._FIELDS if name not in data]
        if missing:
            raise ManifestRejectedError(f"missing fields: {', '.join(missing)}")
        group_id, term_id = data["group_id"], data["term_id"]
        if (
            not isinstance(group_id, int) or isinstance(group_id, bool)
            or not isinstance(term_id, int) or isinstance(term_id, bool)
        ):
            raise ManifestRejectedError("group_id and term_id must be integers")
        bucket, path, content = data["s3_bucket"], data["s3_path"], data["content"]
        if not all(isinstance(value, str) for value in (bucket, path, content)):
            raise ManifestRejectedError("s3_bucket, s3_path and content must be strings")
        try:
            message = await asyncio.to_thread(
                self._service.upload_manifest, group_id, term_id, bucket, path, content,
            )
        except ValueError as error:
            raise ManifestRejectedError(str(error)) from error
        except UploadError as error:
            raise ManifestUploadFailedError(str(error)) from error
        return {"message": message}
