"""Tests for manifest upload — service rules and HTTP adapter."""

from __future__ import annotations

import pytest
from litestar.testing import TestClient

from replica_sentinel.plugins.registry_group_store import RegistryGroupStore
from replica_sentinel.services.manifest_service import (
    GroupNotFoundError,
    GroupOutOfRangeError,
    ManifestService,
    TermMismatchError,
)
from replica_sentinel.services.node_registry import NodeRegistry
from tests.conftest import RecordingUploader

BODY = {
    "group_id": 1,
    "term_id": 3,
    "s3_bucket": "manifests",
    "s3_path": "group-1/MANIFEST",
    "content": "manifest-body",
}


@pytest.fixture()
def service() -> ManifestService:
    registry = NodeRegistry()
    registry.add_host("10.0.0.1", 9221, 1, 3)
    return ManifestService(RegistryGroupStore(registry), RecordingUploader(), max_group_id=100)


@pytest.mark.parametrize("group_id", [0, -1, 101])
def test_group_out_of_range(service: ManifestService, group_id: int) -> None:
    with pytest.raises(GroupOutOfRangeError):
        service.upload_manifest(group_id, 3, "b", "p", "c")


def test_unknown_group(service: ManifestService) -> None:
    with pytest.raises(GroupNotFoundError, match="not exists"):
        service.upload_manifest(2, 3, "b", "p", "c")


def test_term_mismatch(service: ManifestService) -> None:
    with pytest.raises(TermMismatchError):
        service.upload_manifest(1, 2, "b", "p", "c")


def test_upload_success(service: ManifestService) -> None:
    assert service.upload_manifest(1, 3, "b", "p", "c") == "Upload manifest success"


def test_upload_endpoint(
    client: TestClient, uploader: RecordingUploader,  # type: ignore[type-arg]
) -> None:
    resp = client.post("/api/manifest/upload", json=BODY)
    assert resp.status_code == 201
    assert resp.json() == {"message": "Upload manifest success"}
    assert uploader.calls == [("manifests", "group-1/MANIFEST", b"manifest-body")]


@pytest.mark.parametrize(
    ("overrides", "detail"),
    [
        ({"group_id": 0}, "out of range"),
        ({"group_id": 7}, "not exists"),
        ({"term_id": 4}, "not equal"),
        ({"group_id": "1"}, "integers"),
        ({"group_id": True}, "integers"),
        ({"term_id": False}, "integers"),
    ],
)
def test_upload_endpoint_rejects(
    client: TestClient, overrides: dict[str, object], detail: str,  # type: ignore[type-arg]
) -> None:
    resp = client.post("/api/manifest/upload", json={**BODY, **overrides})
    assert resp.status_code == 400
    assert detail in resp.json()["detail"]


def test_upload_endpoint_missing_fields(client: TestClient) -> None:  # type: ignore[type-arg]
    resp = client.post("/api/manifest/upload", json={"group_id": 1})
    assert resp.status_code == 400
    assert "s3_bucket" in resp.json()["detail"]


def test_upload_endpoint_store_failure(
    client: TestClient, uploader: RecordingUploader,  # type: ignore[type-arg]
) -> None:
    uploader._fail = True
    resp = client.post("/api/manifest/upload", json=BODY)
    assert resp.status_code == 502
