"""
Media host client.

Relays a locally staged upload to the configured media host and returns the
durable URL it hands back. The staged file is always removed afterwards,
whether the upload worked or not.
"""
from __future__ import annotations

import logging
import os
from typing import Dict, Optional

import requests
from requests.exceptions import ConnectionError, Timeout, RequestException

from utils.exceptions import DependencyError

logger = logging.getLogger(__name__)


class MediaUploader:
    """Interface: upload(local_path) -> url, or raise DependencyError."""

    def upload(self, local_path: str) -> str:
        raise NotImplementedError


class HttpMediaUploader(MediaUploader):
    def __init__(
        self,
        upload_url: str,
        upload_preset: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: int = 30,
    ):
        self.upload_url = upload_url
        self.upload_preset = upload_preset
        self.api_key = api_key
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    @classmethod
    def from_config(cls, config) -> "HttpMediaUploader":
        return cls(
            upload_url=config.get("MEDIA_UPLOAD_URL"),
            upload_preset=config.get("MEDIA_UPLOAD_PRESET"),
            api_key=config.get("MEDIA_API_KEY"),
            timeout=int(config.get("MEDIA_UPLOAD_TIMEOUT", 30)),
        )

    def _form(self) -> Dict[str, str]:
        form = {}
        if self.upload_preset:
            form["upload_preset"] = self.upload_preset
        if self.api_key:
            form["api_key"] = self.api_key
        return form

    def upload(self, local_path: str) -> str:
        """
        POST the file as multipart form data.

        Returns:
            The `secure_url` (or `url`) from the host's JSON reply

        Raises:
            DependencyError: host unreachable, non-2xx reply, or no URL in reply
        """
        if not local_path or not os.path.exists(local_path):
            raise DependencyError()
        if not self.upload_url:
            logger.error("MEDIA_UPLOAD_URL is not configured; cannot upload %s", local_path)
            os.remove(local_path)
            raise DependencyError()

        try:
            with open(local_path, "rb") as fh:
                response = self.session.post(
                    self.upload_url,
                    data=self._form(),
                    files={"file": (os.path.basename(local_path), fh)},
                    timeout=self.timeout,
                )
            if response.status_code >= 400:
                logger.error("Media host rejected upload (%s): %s", response.status_code, response.text[:200])
                raise DependencyError()
            try:
                body = response.json()
            except ValueError:
                logger.error("Media host returned a non-JSON reply")
                raise DependencyError()
            url = body.get("secure_url") or body.get("url")
            if not url:
                logger.error("Media host reply has no URL")
                raise DependencyError()
            logger.info("Uploaded %s to media host", os.path.basename(local_path))
            return url
        except (ConnectionError, Timeout) as e:
            logger.error("Cannot reach media host at %s: %s", self.upload_url, e)
            raise DependencyError() from e
        except RequestException as e:
            logger.error("Media upload failed: %s", e)
            raise DependencyError() from e
        finally:
            if os.path.exists(local_path):
                os.remove(local_path)
