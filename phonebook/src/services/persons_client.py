"""
Async HTTP client for the persons resource.

Wraps httpx.AsyncClient with one method per CRUD operation. Error
responses are raised as PersonsApiError carrying the server's ``error``
message; a 404 is raised as StaleEntryError so the view can drop the
entry it still holds locally.
"""

from typing import List, Optional

import httpx
from pydantic import BaseModel

from shared.logging import get_logger

logger = get_logger(__name__)


class Person(BaseModel):
    """Phonebook entry as served by the API."""
    id: str
    name: str
    number: str


class PersonsApiError(Exception):
    """A request to the persons resource failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class StaleEntryError(PersonsApiError):
    """The entry no longer exists on the server."""


class PersonsClient:
    """Client for ``/api/persons``."""

    def __init__(
        self,
        base_url: str,
        persons_path: str = "/api/persons",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize persons client.

        Args:
            base_url: Service root URL
            persons_path: Path of the persons resource
            timeout: Request timeout in seconds
            transport: Custom transport (used by tests)
        """
        self.persons_path = persons_path.rstrip("/")
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "PersonsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("persons_request_failed", method=method, path=path, error=str(e))
            raise PersonsApiError(f"could not reach server: {e}") from e

        if response.is_error:
            message = self._error_message(response)
            logger.warning(
                "persons_request_rejected",
                method=method,
                path=path,
                status_code=response.status_code,
                error=message
            )
            error_class = StaleEntryError if response.status_code == 404 else PersonsApiError
            raise error_class(message, response.status_code)

        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return response.reason_phrase

    async def get_all(self) -> List[Person]:
        response = await self._request("GET", self.persons_path)
        return [Person(**item) for item in response.json()]

    async def create(self, name: str, number: str) -> Person:
        response = await self._request("POST", self.persons_path, json={"name": name, "number": number})
        return Person(**response.json())

    async def update(self, person_id: str, name: str, number: str) -> Person:
        response = await self._request(
            "PUT",
            f"{self.persons_path}/{person_id}",
            json={"name": name, "number": number}
        )
        return Person(**response.json())

    async def remove(self, person_id: str) -> None:
        await self._request("DELETE", f"{self.persons_path}/{person_id}")
