"""Async Cloudinary client for blob upload and deletion, using aiohttp.

Only the two signed REST calls the drive needs are implemented.
"""
import asyncio
import hashlib
import logging
import time
from typing import Any, Dict, Optional

import aiohttp

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.cloudinary.com/v1_1"


class CloudinaryAPIError(Exception):
    """Error from a Cloudinary call, carrying status, message, and URL."""

    def __init__(self, status: int, message: str, url: str):
        self.status = status
        self.message = message
        self.url = url
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status} from {self.url}: {self.message}"
        return f"Connection error for {self.url}: {self.message}"


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """Cloudinary request signature: SHA-1 over sorted ``k=v`` pairs plus the secret."""
    to_sign = "&".join(
        f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def resource_type_for(mime_type: Optional[str]) -> str:
    """Resource type Cloudinary's ``auto`` upload assigns to a mime type."""
    mime_type = (mime_type or "").lower()
    if mime_type.startswith("image/") or mime_type == "application/pdf":
        return "image"
    if mime_type.startswith("video/") or mime_type.startswith("audio/"):
        return "video"
    return "raw"


class CloudinaryClient:
    def __init__(
        self, cloud_name: str, api_key: str, api_secret: str,
        timeout: float = 120,
        base_url: str = API_BASE_URL,
    ):
        if not cloud_name or not api_key or not api_secret:
            raise ValueError("Cloudinary credentials not set. Cannot use cloudinary storage.")
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.base_url = base_url
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    def _signed(self, params: Dict[str, Any]) -> Dict[str, str]:
        params = {**params, "timestamp": int(time.time())}
        signed = {k: str(v) for k, v in params.items() if v not in (None, "")}
        signed["signature"] = sign_params(params, self.api_secret)
        signed["api_key"] = self.api_key
        return signed

    async def _post(self, url: str, data) -> Dict[str, Any]:
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.post(url, data=data) as resp:
                    if resp.status >= 400:
                        body = await resp.text()
                        raise CloudinaryAPIError(
                            status=resp.status,
                            message=body[:500] or resp.reason or "No response body",
                            url=url,
                        )
                    return await resp.json()
        except CloudinaryAPIError:
            raise
        except asyncio.TimeoutError as e:
            raise CloudinaryAPIError(status=0, message="Request timed out", url=url) from e
        except aiohttp.ClientError as e:
            raise CloudinaryAPIError(status=0, message=str(e) or type(e).__name__, url=url) from e

    async def upload(
        self, file_bytes: bytes, filename: str, content_type: Optional[str], folder: str,
    ) -> Dict[str, Any]:
        """Upload with ``resource_type=auto``. Returns the decoded JSON response."""
        url = f"{self.base_url}/{self.cloud_name}/auto/upload"
        form = aiohttp.FormData()
        for key, value in self._signed({
            "folder": folder,
            "use_filename": "true",
            "unique_filename": "true",
        }).items():
            form.add_field(key, value)
        form.add_field(
            "file", file_bytes,
            filename=filename,
            content_type=content_type or "application/octet-stream",
        )
        result = await self._post(url, form)
        logger.info("Uploaded %s to Cloudinary as %s", filename, result.get("public_id"))
        return result

    async def destroy(self, public_id: str, resource_type: str = "image") -> Dict[str, Any]:
        url = f"{self.base_url}/{self.cloud_name}/{resource_type}/destroy"
        result = await self._post(url, self._signed({"public_id": public_id}))
        if result.get("result") != "ok":
            logger.warning(f"Cloudinary destroy of {public_id} returned {result.get('result')}")
        return result
