"""Tests for the Cloudinary asset store."""
import hashlib

import httpx
import pytest

from portfolio_uploader.exceptions import AssetStoreError
from portfolio_uploader.services import asset_store as asset_store_module
from portfolio_uploader.services.asset_store import (
    CloudinaryAssetStore,
    build_limit_transformation,
    sign_params,
)


def test_build_limit_transformation():
    assert build_limit_transformation(2048) == (
        "if_w_gt_2048,c_limit,h_2048,w_2048/if_h_gt_2048,c_limit,h_2048,w_2048"
    )


def test_sign_params_sorts_and_skips_empty():
    params = {"timestamp": 1315060510, "public_id": "sample", "folder": "", "overwrite": False, "tags": None}
    expected = hashlib.sha1(b"overwrite=false&public_id=sample&timestamp=1315060510abcd").hexdigest()
    assert sign_params(params, "abcd") == expected


def _store(handler, **kwargs):
    return CloudinaryAssetStore(
        "demo",
        "key-123",
        "secret-456",
        folder="photo-portfolio",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_upload_sends_signed_request(tmp_path, make_image, monkeypatch):
    image = make_image(tmp_path / "a.jpg")
    monkeypatch.setattr(asset_store_module.time, "time", lambda: 1700000000)
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["method"] = request.method
        seen["body"] = request.content
        return httpx.Response(
            200,
            json={
                "public_id": "photo-portfolio/IMG-0001",
                "secure_url": "https://res.cloudinary.com/demo/image/upload/photo-portfolio/IMG-0001.jpg",
                "width": 64,
                "height": 48,
            },
        )

    async with _store(handler) as store:
        asset = await store.upload(image, "IMG-0001", max_dimension=2048)

    assert seen["method"] == "POST"
    assert seen["url"] == "https://api.cloudinary.com/v1_1/demo/image/upload"
    assert asset.url.endswith("IMG-0001.jpg")
    assert (asset.width, asset.height) == (64, 48)
    assert asset.public_id == "photo-portfolio/IMG-0001"

    expected_signature = sign_params(
        {
            "folder": "photo-portfolio",
            "public_id": "IMG-0001",
            "overwrite": False,
            "unique_filename": False,
            "transformation": build_limit_transformation(2048),
            "timestamp": 1700000000,
        },
        "secret-456",
    )
    body = seen["body"]
    assert expected_signature.encode() in body
    assert b"key-123" in body
    assert b"secret-456" not in body
    assert b'name="file"; filename="a.jpg"' in body


@pytest.mark.asyncio
async def test_upload_existing_asset_is_error(tmp_path, make_image):
    image = make_image(tmp_path / "a.jpg")

    def handler(request):
        return httpx.Response(
            200,
            json={"existing": True, "secure_url": "https://x", "width": 1, "height": 1},
        )

    async with _store(handler) as store:
        with pytest.raises(AssetStoreError, match="already exists"):
            await store.upload(image, "IMG-0001", max_dimension=2048)


@pytest.mark.asyncio
async def test_upload_error_response(tmp_path, make_image):
    image = make_image(tmp_path / "a.jpg")

    def handler(request):
        return httpx.Response(400, json={"error": {"message": "Invalid Signature"}})

    async with _store(handler) as store:
        with pytest.raises(AssetStoreError, match="Invalid Signature"):
            await store.upload(image, "IMG-0001", max_dimension=2048)


@pytest.mark.asyncio
async def test_network_error_is_wrapped(tmp_path, make_image):
    image = make_image(tmp_path / "a.jpg")

    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _store(handler) as store:
        with pytest.raises(AssetStoreError, match="connection refused"):
            await store.upload(image, "IMG-0001", max_dimension=2048)


@pytest.mark.asyncio
async def test_list_by_prefix_uses_admin_auth_and_cursor():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(
            200,
            json={"resources": [{"public_id": "photo-portfolio/IMG-0001"}], "next_cursor": "abc"},
        )

    async with _store(handler) as store:
        page = await store.list_by_prefix("photo-portfolio", cursor="prev")

    assert page == {"public_ids": ["photo-portfolio/IMG-0001"], "next_cursor": "abc"}
    assert seen["params"] == {
        "type": "upload",
        "prefix": "photo-portfolio",
        "max_results": "100",
        "next_cursor": "prev",
    }
    assert seen["auth"].startswith("Basic ")


@pytest.mark.asyncio
async def test_delete_sends_public_ids():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["ids"] = request.url.params.get_list("public_ids[]")
        return httpx.Response(200, json={"deleted": {}})

    async with _store(handler) as store:
        await store.delete(["photo-portfolio/IMG-0001", "photo-portfolio/IMG-0002"])

    assert seen["method"] == "DELETE"
    assert seen["ids"] == ["photo-portfolio/IMG-0001", "photo-portfolio/IMG-0002"]


@pytest.mark.asyncio
async def test_delete_nothing_makes_no_request():
    def handler(request):
        raise AssertionError("no request expected")

    async with _store(handler) as store:
        await store.delete([])


@pytest.mark.asyncio
async def test_requires_context():
    store = CloudinaryAssetStore("demo", "k", "s")
    with pytest.raises(RuntimeError, match="async with"):
        await store.list_by_prefix("x")
