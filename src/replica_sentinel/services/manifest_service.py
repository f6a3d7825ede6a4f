"""Business logic for uploading a group's manifest to object storage."""

from __future__ import annotations

from replica_sentinel.plugins.contracts.group_store import GroupStore
from replica_sentinel.plugins.contracts.uploader import ArtifactUploader


class GroupOutOfRangeError(ValueError):
    """Raised when a group id is outside ``1..max_group_id``."""


class GroupNotFoundError(ValueError):
    """Raised when the group store does not know the group."""


class TermMismatchError(ValueError):
    """Raised when the caller's term differs from the group's current term."""


class ManifestService:
    """Built once at startup with its store and uploader pre-wired."""

    def __init__(
        self,
        group_store: GroupStore,
        uploader: ArtifactUploader,
        *,
        max_group_id: int = 100,
    ) -> None:
        self._groups = group_store
        self._uploader = uploader
        self._max_group_id = max_group_id

    def upload_manifest(
        self, group_id: int, term_id: int, bucket: str, path: str, content: str | bytes,
    ) -> str:
        """Upload ``content`` as ``bucket/path`` on behalf of a group.

        Only the group's current term may upload.

        Raises:
            GroupOutOfRangeError: If group_id is not in 1..max_group_id.
            GroupNotFoundError: If the group is unknown.
            TermMismatchError: If term_id is stale or ahead.
            UploadError: If the uploader fails.
        """
        if group_id <= 0 or group_id > self._max_group_id:
            raise GroupOutOfRangeError(f"Invalid group id = {group_id}, out of range")
        current = self._groups.term_of(group_id)
        if current is None:
            raise GroupNotFoundError(f"Group-[{group_id}] not exists")
        if current != term_id:
            raise TermMismatchError(
                f"Group-[{group_id}] term id:[{term_id}] "
                f"not equal to pika term id:[{current}]"
            )
        if isinstance(content, str):
            content = content.encode()
        self._uploader.upload_artifact(bucket, path, content)
        return "Upload manifest success"
