"""Supabase REST (PostgREST) gateway implemented with httpx."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from volunteer_board.errors import DecodeError, NetworkError, RemoteError

logger = logging.getLogger(__name__)

Row = dict[str, object]


class RestGateway(Protocol):
    """Interface for select/insert/update/delete against a REST resource."""

    async def select(self, resource: str, query: str = "") -> list[Row]:
        """Return rows of a resource matching a query string."""

    async def insert(self, resource: str, payload: Row) -> list[Row]:
        """Insert a row and return whatever the store echoes back."""

    async def update(self, resource: str, payload: Row, filter_expr: str) -> list[Row]:
        """Patch the rows matching a filter expression."""

    async def delete(self, resource: str, filter_expr: str) -> list[Row]:
        """Delete the rows matching a filter expression."""


@dataclass
class HttpxRestGateway(RestGateway):
    """PostgREST gateway using a shared httpx session."""

    base_url: str
    api_key: str
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(
        cls, base_url: str, api_key: str, timeout: float = 10.0
    ) -> "HttpxRestGateway":
        """Create a gateway with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            api_key=api_key,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def select(self, resource: str, query: str = "") -> list[Row]:
        """Issue a GET for the resource."""
        return await self._request("GET", self._url(resource, query))

    async def insert(self, resource: str, payload: Row) -> list[Row]:
        """Issue a POST with a JSON body."""
        return await self._request(
            "POST",
            self._url(resource),
            payload=payload,
            headers={"Prefer": "return=representation"},
        )

    async def update(self, resource: str, payload: Row, filter_expr: str) -> list[Row]:
        """Issue a PATCH scoped by a filter expression."""
        return await self._request(
            "PATCH",
            self._url(resource, filter_expr),
            payload=payload,
            headers={"Prefer": "return=representation"},
        )

    async def delete(self, resource: str, filter_expr: str) -> list[Row]:
        """Issue a DELETE scoped by a filter expression."""
        return await self._request("DELETE", self._url(resource, filter_expr))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _url(self, resource: str, query: str = "") -> str:
        url = f"{self.base_url}/rest/v1/{resource}"
        return f"{url}?{query}" if query else url

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }

    async def _request(
        self,
        method: str,
        url: str,
        payload: Row | None = None,
        headers: dict[str, str] | None = None,
    ) -> list[Row]:
        try:
            response = await self.http_client.request(
                method,
                url,
                json=payload,
                headers={**self._headers(), **(headers or {})},
                timeout=self.timeout,
            )
        except httpx.TransportError as exc:
            logger.error("Supabase request failed: %s %s", method, url)
            raise NetworkError(str(exc)) from exc
        if not response.is_success:
            logger.error(
                "Supabase error: %s %s",
                response.status_code,
                response.text,
            )
            raise RemoteError(response.status_code, response.text)
        return _decode_rows(response.text)


def select_query(
    columns: str = "*", order: str | None = None, desc: bool = False
) -> str:
    """Build a PostgREST read query such as select=*&order=created_at.desc."""
    query = f"select={columns}"
    if order:
        direction = "desc" if desc else "asc"
        query = f"{query}&order={order}.{direction}"
    return query


def eq_filter(column: str, value: object) -> str:
    """Build a PostgREST equality filter such as id=eq.7."""
    return f"{column}=eq.{value}"


def _decode_rows(text: str) -> list[Row]:
    """Parse a response body into rows; an empty body means no rows."""
    if not text.strip():
        return []
    try:
        parsed = json.loads(text)
    except ValueError as exc:
        logger.error("JSON parse error, response text: %s", text)
        raise DecodeError(text) from exc
    if isinstance(parsed, dict):
        return [parsed]
    if isinstance(parsed, list):
        return parsed
    raise DecodeError(text)
