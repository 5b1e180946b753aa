# certregistry/content_store.py
import json
import logging
from typing import Dict, Optional

import requests

from .errors import ContentStoreError
from .settings import settings

log = logging.getLogger("content_store")


class IpfsClient:
    """
    Adds files through the HTTP API of an IPFS node or an IPFS-cluster proxy
    (both expose POST {api}/add).
    """

    def __init__(self, api_url: str, timeout: int = 60):
        self.add_url = f"{api_url.rstrip('/')}/add"
        self.timeout = timeout

    def store(self, data: bytes, name: Optional[str] = None) -> str:
        files = {"file": (name or "file", data)}
        try:
            res = requests.post(self.add_url, files=files, params={"pin": "true"}, timeout=self.timeout)
            res.raise_for_status()
            # the add endpoint streams one JSON object per line; the last one is the root
            lines = [line for line in res.text.splitlines() if line.strip()]
            body = json.loads(lines[-1]) if lines else {}
        except (requests.RequestException, ValueError) as e:
            log.error("IPFS add to %s failed: %s", self.add_url, e)
            raise ContentStoreError("Content store upload failed") from e

        cid = body.get("Hash") or body.get("cid")
        if isinstance(cid, dict):
            cid = cid.get("/")
        if not cid:
            log.error("IPFS add returned no CID: %r", body)
            raise ContentStoreError("Content store did not return a CID")
        return cid


class PinataClient:
    """Pins files to IPFS through the Pinata pinning service."""

    def __init__(
        self,
        base_url: str = "https://api.pinata.cloud",
        jwt: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        timeout: int = 60,
    ):
        self.pin_file_url = f"{base_url.rstrip('/')}/pinning/pinFileToIPFS"
        self.jwt = jwt
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout

    def _auth_headers(self) -> Dict[str, str]:
        if self.jwt:
            return {"Authorization": f"Bearer {self.jwt}"}
        if self.api_key and self.api_secret:
            return {"pinata_api_key": self.api_key, "pinata_secret_api_key": self.api_secret}
        raise ContentStoreError("Pinata credentials not configured")

    def store(self, data: bytes, name: Optional[str] = None) -> str:
        headers = self._auth_headers()
        files = {"file": (name or "file", data)}
        payload = {}
        if name:
            payload["pinataMetadata"] = json.dumps({"name": name})
        try:
            res = requests.post(self.pin_file_url, files=files, data=payload, headers=headers, timeout=self.timeout)
            res.raise_for_status()
            body = res.json()
        except (requests.RequestException, ValueError) as e:
            log.error("Pinata upload failed: %s", e)
            raise ContentStoreError("Content store upload failed") from e

        cid = body.get("IpfsHash") or body.get("ipfsHash")
        if not cid:
            log.error("Pinata returned no CID: %r", body)
            raise ContentStoreError("Content store did not return a CID")
        return cid


def get_content_store():
    """FastAPI dependency returning the configured content store client."""
    if settings.CONTENT_STORE == "pinata":
        return PinataClient(
            base_url=settings.PINATA_BASE_URL,
            jwt=settings.PINATA_JWT,
            api_key=settings.PINATA_API_KEY,
            api_secret=settings.PINATA_API_SECRET,
            timeout=settings.CONTENT_STORE_TIMEOUT,
        )
    return IpfsClient(settings.IPFS_API_URL, timeout=settings.CONTENT_STORE_TIMEOUT)
