"""
Tribler REST API client.

Failures are classified so that handlers can answer differently:
- ConfigurationError: endpoint or key missing, raised before any network use
- TransportError: Tribler unreachable or too slow
- RemoteEngineError: Tribler answered with a non-2xx status
- DecodeError: Tribler answered 2xx with a payload we cannot read
"""
import asyncio
import json
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlsplit

import aiohttp
from loguru import logger
from pydantic import BaseModel, ValidationError

from tribler_arr_shim.config import TriblerConfig
from tribler_arr_shim.constants import TRIBLER_API_KEY_HEADER, TRIBLER_RUN_STATES
from tribler_arr_shim.exceptions import (
    ConfigurationError,
    DecodeError,
    NotFound,
    RemoteEngineError,
    TransportError,
)
from tribler_arr_shim.schemas import (
    AddDownloadResponse,
    DownloadsResponse,
    FilesResponse,
    RemoteDownload,
    RemoteFile,
)


class TriblerClient:
    """Client for interacting with the Tribler REST API."""

    def __init__(self, config: TriblerConfig):
        self.config = config
        self.url = config.api_endpoint.rstrip("/")
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            # ssl=False disables certificate checks, True keeps aiohttp's default verification
            connector = aiohttp.TCPConnector(ssl=not self.config.tls_skip_verify)
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.config.timeout)
            )
        return self._session

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def _check_config(self):
        if not self.config.api_endpoint:
            raise ConfigurationError("TRIBLER_API_ENDPOINT is not set")
        endpoint = urlsplit(self.config.api_endpoint)
        if endpoint.scheme not in ("http", "https") or not endpoint.netloc:
            raise ConfigurationError(f"TRIBLER_API_ENDPOINT must be an http(s) URL, got {self.config.api_endpoint!r}")
        if not self.config.api_key:
            raise ConfigurationError("TRIBLER_API_KEY is not set")

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> bytes:
        """Perform one request and return the raw body of a 2xx response."""
        self._check_config()
        url = f"{self.url}{path}"
        headers = {TRIBLER_API_KEY_HEADER: self.config.api_key}
        logger.debug(f"Tribler {method} {path} params={params} body={body}")

        try:
            async with self.session.request(method, url, params=params, json=body, headers=headers) as response:
                raw = await response.read()
                if not 200 <= response.status < 300:
                    status_line = f"{response.status} {response.reason or ''}".strip()
                    logger.warning(f"Tribler {method} {path} failed: {status_line}")
                    raise RemoteEngineError(response.status, status_line, raw.decode("utf-8", errors="replace"))
                return raw
        except aiohttp.InvalidURL as e:
            raise ConfigurationError(f"Invalid Tribler URL {url}: {e}") from e
        except (aiohttp.ClientConnectionError, asyncio.TimeoutError) as e:
            logger.error(f"Tribler {method} {path} unreachable: {type(e).__name__}: {e}")
            raise TransportError(f"Tribler unreachable at {self.url}: {e}") from e
        except aiohttp.ClientPayloadError as e:
            raise DecodeError(f"Truncated response from Tribler {method} {path}: {e}") from e

    @staticmethod
    def _decode(raw: bytes, model: type[BaseModel], what: str) -> Any:
        try:
            return model.model_validate(json.loads(raw))
        except ValueError as e:
            # UnicodeDecodeError, json.JSONDecodeError and ValidationError are all ValueErrors
            kind = "invalid payload" if isinstance(e, ValidationError) else "invalid JSON"
            logger.error(f"Tribler returned {kind} for {what}: {e}")
            raise DecodeError(f"Tribler returned {kind} for {what}") from e

    async def test_connection(self) -> bool:
        """Test connection and authentication."""
        try:
            await self.list_downloads()
            return True
        except Exception as e:
            logger.error(f"Tribler connection test failed: {e}")
            return False

    async def list_downloads(self) -> List[RemoteDownload]:
        """Every download Tribler currently knows about."""
        raw = await self._request("GET", "/downloads")
        return self._decode(raw, DownloadsResponse, "GET /downloads").downloads

    async def get_download(self, infohash: str) -> RemoteDownload:
        """One download by infohash; NotFound when Tribler does not list it."""
        raw = await self._request("GET", "/downloads", params={"infohash": infohash})
        response = self._decode(raw, DownloadsResponse, f"GET /downloads?infohash={infohash}")
        for download in response.downloads:
            if download.infohash.lower() == infohash.lower():
                return download
        raise NotFound(infohash)

    async def add_download(self, uri: str, destination: Optional[str] = None) -> str:
        """Start a download from a magnet or URL and return its infohash."""
        body = {
            "anon_hops": self.config.anon_hops,
            "safe_seeding": self.config.safe_seeding,
            "uri": uri,
            "destination": destination or self.config.download_dir,
        }
        raw = await self._request("PUT", "/downloads", body=body)
        response = self._decode(raw, AddDownloadResponse, "PUT /downloads")
        logger.info(f"Tribler started download {response.infohash}")
        return response.infohash

    async def delete_download(self, infohash: str, remove_data: bool = False):
        await self._request("DELETE", f"/downloads/{quote(infohash)}", body={"remove_data": remove_data})
        logger.info(f"Tribler removed download {infohash} (remove_data={remove_data})")

    async def update_download(self, infohash: str, state: str):
        """Change the run state of a download: stop, resume or recheck."""
        if state not in TRIBLER_RUN_STATES:
            raise ValueError(f"Unsupported Tribler download state: {state}")
        await self._request("PATCH", f"/downloads/{quote(infohash)}", body={"state": state})
        logger.debug(f"Tribler download {infohash} -> {state}")

    async def get_files(self, infohash: str) -> List[RemoteFile]:
        """Files of one download; NotFound when Tribler does not know the infohash."""
        try:
            raw = await self._request("GET", f"/downloads/{quote(infohash)}/files")
        except RemoteEngineError as e:
            if e.status != 404:
                raise
            raise NotFound(infohash) from e
        return self._decode(raw, FilesResponse, f"GET /downloads/{infohash}/files").files
