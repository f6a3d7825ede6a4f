"""Manifest controller — thin HTTP adapter for ManifestResource."""

from __future__ import annotations

from litestar import Controller, post
from litestar.exceptions import HTTPException

from replica_sentinel.resources.manifest import (
    ManifestRejectedError,
    ManifestResource,
    ManifestUploadFailedError,
)


class ManifestController(Controller):
    """Upload manifests on behalf of a group's current term."""

    path = "/api/manifest"

    @post("/upload", status_code=201)
    async def upload(
        self, data: dict[str, object], manifest_resource: ManifestResource,
    ) -> dict[str, str]:
        """Body: {"group_id", "term_id", "s3_bucket", "s3_path", "content"}."""
        try:
            return await manifest_resource.upload(data)
        except ManifestRejectedError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        except ManifestUploadFailedError as error:
            raise HTTPException(status_code=502, detail=str(error)) from error
