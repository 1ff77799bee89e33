"""
Image host client (Cloudinary).

The rest of the service only relies on two operations: ``upload`` returns
a stable public URL plus a deletable public id, and ``destroy`` accepts a
previously issued public id (an already-missing image counts as deleted).
Requests are signed with the account's API secret as Cloudinary expects.
"""

import hashlib
import logging
import random
import time
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any, Dict, Optional

import httpx

from backend.app.core.config import Settings, settings
from backend.app.core.exceptions import ImageHostError

logger = logging.getLogger("carsawa.image_host")

CLOUDINARY_API = "https://api.cloudinary.com/v1_1"
MAX_WIDTH_TRANSFORMATION = "c_limit,w_1200"


@dataclass(frozen=True)
class UploadedImage:
    public_id: str
    url: str
    secure_url: str
    size: int


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """Cloudinary request signature: sha1 over the sorted ``k=v`` pairs plus the secret."""
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def make_public_id(filename: str) -> str:
    """Unique public id: ``<millis>-<random><original basename>``."""
    suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{suffix}{PurePath(filename or 'image').stem}"


class CloudinaryImageHost:
    """Async Cloudinary client for signed uploads and deletions."""

    def __init__(self, config: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.cloud_name = config.cloudinary_cloud_name
        self.api_key = config.cloudinary_api_key
        self.api_secret = config.cloudinary_api_secret
        self.folder = config.cloudinary_folder
        self.timeout = httpx.Timeout(config.image_host_timeout_seconds, connect=10.0)
        self.transport = transport

    def _endpoint(self, action: str) -> str:
        return f"{CLOUDINARY_API}/{self.cloud_name}/image/{action}"

    def _signed(self, params: Dict[str, Any]) -> Dict[str, Any]:
        params = {**params, "timestamp": int(time.time())}
        params["signature"] = sign_params(params, self.api_secret)
        params["api_key"] = self.api_key
        return params

    async def _post(self, action: str, data: Dict[str, Any], files: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise ImageHostError("Image host is not configured")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self._endpoint(action), data=data, files=files)
        except httpx.HTTPError as exc:
            logger.error("Image host unreachable: %s", exc)
            raise ImageHostError("Image host unreachable")

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if response.status_code >= 400:
            error = payload.get("error", {}).get("message", response.text)
            logger.error("Image host rejected %s: %s", action, error)
            raise ImageHostError(f"Image host error: {error}")
        return payload

    async def upload(self, content: bytes, filename: str, content_type: str) -> UploadedImage:
        params = self._signed({
            "folder": self.folder,
            "public_id": make_public_id(filename),
            "transformation": MAX_WIDTH_TRANSFORMATION,
        })
        payload = await self._post(
            "upload",
            data=params,
            files={"file": (filename, content, content_type)},
        )
        url = payload["url"]
        return UploadedImage(
            public_id=payload["public_id"],
            url=url,
            secure_url=payload.get("secure_url") or url.replace("http://", "https://", 1),
            size=payload.get("bytes", len(content)),
        )

    async def destroy(self, public_id: str) -> bool:
        """
        Delete an image by public id.

        Returns False when the host no longer knows the image.
        """
        payload = await self._post("destroy", data=self._signed({"public_id": public_id}))
        result = payload.get("result")
        if result not in ("ok", "not found"):
            raise ImageHostError(f"Image host error: {result}")
        return result == "ok"


image_host = CloudinaryImageHost(settings)


def get_image_host() -> CloudinaryImageHost:
    """FastAPI dependency returning the process-wide image host client."""
    return image_host
