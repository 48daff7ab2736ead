"""
Asset Store - Single Responsibility: upload images to Cloudinary.

Talks to the Cloudinary REST API directly through httpx: signed uploads for
ingestion, the admin resources API for listing and bulk deletion.
"""
import asyncio
import hashlib
import logging
import mimetypes
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from ..exceptions import AssetStoreError
from ..models import UploadedAsset
from ..protocols import IAssetStore

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.cloudinary.com"
PAGE_SIZE = 100


def build_limit_transformation(max_dimension: int) -> str:
    """Conditional limit for whichever axis is the long one."""
    m = max_dimension
    return f"if_w_gt_{m},c_limit,h_{m},w_{m}/if_h_gt_{m},c_limit,h_{m},w_{m}"


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """Cloudinary request signature: sha1 of sorted ``k=v`` pairs plus secret."""
    to_sign = "&".join(
        f"{key}={_param_value(value)}"
        for key, value in sorted(params.items())
        if value is not None and value != ""
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class CloudinaryAssetStore(IAssetStore):
    """
    Cloudinary client for the upload pipeline.

    Usage:
        async with CloudinaryAssetStore(cloud, key, secret, folder="photo-portfolio") as store:
            asset = await store.upload(path, "IMG-0001", max_dimension=2048)
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "photo-portfolio",
        api_base: str = DEFAULT_API_BASE,
        timeout: int = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._folder = folder
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def folder(self) -> str:
        return self._folder

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=f"{self._api_base}/v1_1/{self._cloud_name}",
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("CloudinaryAssetStore not initialized. Use 'async with' context.")
        return self._client

    async def upload(self, path: Path, public_id: str, max_dimension: int) -> UploadedAsset:
        client = self._require_client()
        path = Path(path)
        params: Dict[str, Any] = {
            "folder": self._folder,
            "public_id": public_id,
            "overwrite": False,
            "unique_filename": False,
            "transformation": build_limit_transformation(max_dimension),
            "timestamp": int(time.time()),
        }
        data = {key: _param_value(value) for key, value in params.items()}
        data["api_key"] = self._api_key
        data["signature"] = sign_params(params, self._api_secret)

        content = await asyncio.to_thread(path.read_bytes)
        mimetype = mimetypes.guess_type(path.name)[0] or "application/octet-stream"

        payload = await self._send(
            client,
            "POST",
            "/image/upload",
            data=data,
            files={"file": (path.name, content, mimetype)},
        )
        if payload.get("existing"):
            raise AssetStoreError(f"asset {public_id} already exists (overwrite disabled)")

        return UploadedAsset(
            url=payload["secure_url"],
            width=int(payload["width"]),
            height=int(payload["height"]),
            public_id=payload.get("public_id"),
        )

    async def list_by_prefix(self, prefix: str, cursor: Optional[str] = None) -> Dict[str, Any]:
        client = self._require_client()
        params: Dict[str, Any] = {"type": "upload", "prefix": prefix, "max_results": PAGE_SIZE}
        if cursor:
            params["next_cursor"] = cursor
        payload = await self._send(client, "GET", "/resources/image/upload", params=params, admin=True)
        return {
            "public_ids": [item["public_id"] for item in payload.get("resources", [])],
            "next_cursor": payload.get("next_cursor"),
        }

    async def delete(self, public_ids: List[str]) -> None:
        if not public_ids:
            return
        client = self._require_client()
        params = [("public_ids[]", public_id) for public_id in public_ids]
        await self._send(client, "DELETE", "/resources/image/upload", params=params, admin=True)
        logger.debug("Deleted %d assets", len(public_ids))

    async def _send(
        self,
        client: httpx.AsyncClient,
        method: str,
        endpoint: str,
        admin: bool = False,
        **kwargs,
    ) -> Dict[str, Any]:
        if admin:
            kwargs["auth"] = (self._api_key, self._api_secret)
        try:
            response = await client.request(method, endpoint, **kwargs)
        except httpx.HTTPError as exc:
            raise AssetStoreError(f"{method} {endpoint} failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.status_code >= 400:
            error = payload.get("error") if isinstance(payload, dict) else None
            message = error.get("message") if isinstance(error, dict) else error
            raise AssetStoreError(
                f"Cloudinary error {response.status_code} on {method} {endpoint}: "
                f"{message or response.text}"
            )
        return payload
