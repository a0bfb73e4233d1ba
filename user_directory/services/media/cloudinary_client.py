from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass
from typing import Any

import requests

DEFAULT_CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"
DEFAULT_ALLOWED_FORMATS = ("jpg", "png", "jpeg", "gif")

# Parameters Cloudinary excludes from the request signature.
_UNSIGNED_PARAMS = {"file", "api_key", "resource_type", "cloud_name"}


class MediaStorageError(Exception):
    status_code = 500
    code = "media_error"


class MediaNotConfigured(MediaStorageError):
    pass


@dataclass(frozen=True)
class CloudinaryConfig:
    cloud_name: str
    api_key: str
    api_secret: str
    folder: str = "user-profiles"
    api_base: str = DEFAULT_CLOUDINARY_API_BASE
    timeout_s: float = 30.0
    max_width: int = 500
    max_height: int = 500
    allowed_formats: tuple[str, ...] = DEFAULT_ALLOWED_FORMATS

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


@dataclass(frozen=True)
class StoredMedia:
    url: str
    public_id: str


def mask_secret(value: str) -> str:
    v = (value or "").strip()
    if not v:
        return "not set"
    return f"***{v[-4:]}"


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """
    Cloudinary request signature: SHA-1 over `k1=v1&k2=v2...` (keys sorted,
    empty values dropped) immediately followed by the API secret.
    """
    to_sign = "&".join(
        f"{k}={params[k]}"
        for k in sorted(params)
        if k not in _UNSIGNED_PARAMS and params[k] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryMediaStore:
    """Signed upload / destroy calls against the Cloudinary REST API."""

    def __init__(self, config: CloudinaryConfig, *, logger: logging.Logger | None = None):
        self._config = config
        self._logger = logger or logging.getLogger(__name__)

    @property
    def config(self) -> CloudinaryConfig:
        return self._config

    def _url(self, action: str) -> str:
        return f"{self._config.api_base.rstrip('/')}/{self._config.cloud_name}/image/{action}"

    def _signed(self, params: dict[str, Any]) -> dict[str, Any]:
        if not self._config.configured:
            raise MediaNotConfigured("Cloudinary credentials are not configured")
        body = dict(params)
        body["timestamp"] = int(time.time())
        body["signature"] = sign_params(body, self._config.api_secret)
        body["api_key"] = self._config.api_key
        return body

    def _post(self, action: str, data: dict[str, Any], files: dict[str, Any] | None = None) -> dict[str, Any]:
        url = self._url(action)
        try:
            resp = requests.post(url, data=data, files=files, timeout=self._config.timeout_s)
        except requests.RequestException as exc:
            self._logger.error("Cloudinary POST %s failed: %s", url, exc)
            raise MediaStorageError(f"Cloudinary request failed: {exc}") from exc

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if resp.status_code != 200:
            message = ""
            err = payload.get("error") if isinstance(payload, dict) else None
            if isinstance(err, dict):
                message = str(err.get("message") or "")
            self._logger.error("Cloudinary POST %s failed: HTTP %s %s", url, resp.status_code, message)
            raise MediaStorageError(message or f"Cloudinary HTTP {resp.status_code}")

        if not isinstance(payload, dict):
            self._logger.error("Cloudinary POST %s invalid JSON", url)
            raise MediaStorageError("Cloudinary returned an invalid response")
        return payload

    def transformation(self) -> str:
        return f"c_limit,h_{self._config.max_height},w_{self._config.max_width}/q_auto:good"

    def store(self, content: bytes, *, filename: str, content_type: str | None = None) -> StoredMedia:
        data = self._signed(
            {
                "folder": self._config.folder,
                "allowed_formats": ",".join(self._config.allowed_formats),
                "transformation": self.transformation(),
            }
        )
        files = {"file": (filename, content, content_type or "application/octet-stream")}
        payload = self._post("upload", data, files=files)

        url = payload.get("secure_url")
        public_id = payload.get("public_id")
        if not url or not public_id:
            self._logger.error("Cloudinary upload response missing secure_url/public_id: %s", sorted(payload))
            raise MediaStorageError("Cloudinary upload response incomplete")

        self._logger.info("Uploaded %s to Cloudinary as %s", filename, public_id)
        return StoredMedia(url=url, public_id=public_id)

    def delete(self, public_id: str) -> bool:
        payload = self._post("destroy", self._signed({"public_id": public_id}))
        result = payload.get("result")
        if result != "ok":
            self._logger.warning("Cloudinary destroy %s returned %s", public_id, result)
            return False
        return True
