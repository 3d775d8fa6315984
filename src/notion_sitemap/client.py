"""
Thin asynchronous wrapper around the Notion REST API
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests

from .errors import ApiError, NotionSitemapError, Result, UnknownError

DEFAULT_BASE_URL = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2022-06-28"


class NotionClient:
    """
    Issues single and cursor-paginated requests against the Notion API.

    Every operation returns a ``Result``. Failures are logged here and never
    raised to the caller.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        notion_version: str = DEFAULT_NOTION_VERSION,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the client.

        Args:
            token: Notion integration token
            base_url: API root (default: https://api.notion.com/v1)
            notion_version: Value of the Notion-Version header
            timeout: Request timeout in seconds (default: 30.0)
            headers: Optional extra headers
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Notion-Version": notion_version,
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )
        if headers:
            self.session.headers.update(headers)

    def _send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Perform one blocking HTTP call and return the decoded JSON object.

        Raises:
            ApiError: the API answered with an error status or error object
            UnknownError: transport failure or an undecodable response
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method, url, params=params, json=body, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise UnknownError(f"Request to {url} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            if isinstance(payload, dict):
                raise ApiError(
                    payload.get("message") or str(e),
                    status=payload.get("status", response.status_code),
                    code=payload.get("code"),
                ) from e
            raise ApiError(str(e), status=response.status_code) from e

        if not isinstance(payload, dict):
            raise UnknownError(f"Unexpected response from {url}: {payload!r}")
        if payload.get("object") == "error":
            raise ApiError(
                payload.get("message", "Notion API error"),
                status=payload.get("status"),
                code=payload.get("code"),
            )
        return payload

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Result[Dict[str, Any]]:
        try:
            payload = await asyncio.to_thread(self._send, method, path, params, body)
        except ApiError as e:
            self.logger.error(f"API_ERROR on {method} {path}: {e}")
            return Result.failure(e)
        except NotionSitemapError as e:
            self.logger.error(f"UNKNOWN_ERROR on {method} {path}: {e}")
            return Result.failure(e)
        except Exception as e:
            self.logger.exception(f"UNKNOWN_ERROR on {method} {path}")
            return Result.failure(UnknownError(str(e)))
        return Result.success(payload)

    def _page_results(self, page: Dict[str, Any], path: str) -> Result[List[Dict[str, Any]]]:
        results = page.get("results")
        if results is None:
            return Result.success([])
        if not isinstance(results, list) or not all(isinstance(item, dict) for item in results):
            error = UnknownError(f"Malformed results from {path}: {results!r}")
            self.logger.error(f"UNKNOWN_ERROR: {error}")
            return Result.failure(error)
        return Result.success(results)

    async def _paginated_request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Result[Dict[str, Any]]:
        """
        Follow ``next_cursor`` until ``has_more`` is false.

        The cursor goes into the JSON body when one is sent, otherwise into
        the query string. A failure on any page, a page whose ``results`` is
        not a list of objects, or ``has_more`` without a cursor fails the
        whole request.
        """
        result = await self._request(method, path, params=params, body=body)
        if not result.ok:
            return result

        first_page = result.value
        page = first_page
        page_count = 1
        collected: List[Dict[str, Any]] = []

        while True:
            results = self._page_results(page, path)
            if not results.ok:
                return results
            collected.extend(results.value)

            if not page.get("has_more"):
                break

            cursor = page.get("next_cursor")
            if not cursor:
                error = UnknownError(f"{path} reported more results without a next_cursor")
                self.logger.error(f"UNKNOWN_ERROR: {error}")
                return Result.failure(error)
            if body is not None:
                body = dict(body, start_cursor=cursor)
            else:
                params = dict(params or {}, start_cursor=cursor)

            result = await self._request(method, path, params=params, body=body)
            if not result.ok:
                self.logger.error(
                    f"Discarding {len(collected)} results from {path}: page {page_count + 1} failed"
                )
                return result

            page = result.value
            page_count += 1

        self.logger.debug(f"Fetched {len(collected)} results from {path} in {page_count} page(s)")
        return Result.success(
            dict(first_page, results=collected, has_more=False, next_cursor=None)
        )

    async def query_collection(
        self, collection_id: str, filter: Optional[Dict[str, Any]] = None
    ) -> Result[Dict[str, Any]]:
        """
        Query every member page of a database.

        Args:
            collection_id: Database id
            filter: Optional Notion filter object

        Returns:
            Result wrapping the aggregated query response
        """
        body: Dict[str, Any] = {}
        if filter:
            body["filter"] = filter
        return await self._paginated_request(
            "POST", f"/databases/{collection_id}/query", body=body
        )

    async def fetch_collection_metadata(self, collection_id: str) -> Result[Dict[str, Any]]:
        return await self._request("GET", f"/databases/{collection_id}")

    async def fetch_document(self, document_id: str) -> Result[Dict[str, Any]]:
        return await self._request("GET", f"/pages/{document_id}")

    async def create_document(self, params: Dict[str, Any]) -> Result[Dict[str, Any]]:
        """Create a page; ``params`` is the request body (parent, properties, ...)."""
        return await self._request("POST", "/pages", body=params)

    async def fetch_block(self, block_id: str) -> Result[Dict[str, Any]]:
        return await self._request("GET", f"/blocks/{block_id}")

    async def fetch_block_children(self, params: Dict[str, Any]) -> Result[Dict[str, Any]]:
        """
        List every child block of a block.

        Args:
            params: Must contain ``block_id``; other keys (e.g. ``page_size``)
                are sent as query parameters

        Returns:
            Result wrapping the aggregated children listing
        """
        query = dict(params)
        block_id = query.pop("block_id", None)
        if not block_id:
            error = UnknownError("fetch_block_children requires a block_id")
            self.logger.error(f"UNKNOWN_ERROR: {error}")
            return Result.failure(error)
        return await self._paginated_request(
            "GET", f"/blocks/{block_id}/children", params=query
        )

    def close(self) -> None:
        self.session.close()
