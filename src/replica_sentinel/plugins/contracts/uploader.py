"""Artifact uploader contract — object storage behind an injected interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ArtifactUploader(ABC):
    """Stores a blob under ``bucket/key``.

    Credentials and endpoints come from the implementation's constructor,
    never from constants or local file paths.
    """

    @abstractmethod
    def upload_artifact(self, bucket: str, key: str, content: bytes) -> None:
        """Store ``content``.

        Raises:
            UploadError: If the store rejects the object.
        """
