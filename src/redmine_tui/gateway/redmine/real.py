"""Production Redmine gateway over the REST API."""

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable
from typing import Any, TypeVar

from redmine_tui.gateway.redmine.abc import (
    RedmineApiError,
    RedmineConnectionError,
    RedmineGateway,
)
from redmine_tui.gateway.redmine.parsing import (
    parse_issue,
    parse_priority,
    parse_project,
    parse_status,
    parse_user,
)
from redmine_tui.gateway.redmine.types import Issue, Priority, Project, Status, User

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 30.0


class RealRedmineGateway(RedmineGateway):
    """Gateway that talks to a Redmine server with an API key.

    Uses the JSON flavour of the REST API (``/issues.json`` etc.) and
    authenticates with the ``X-Redmine-API-Key`` header.
    """

    def __init__(self, *, base_url: str, api_key: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        """Initialize the gateway.

        Args:
            base_url: Server root, e.g. "https://redmine.example.com"
            api_key: Personal API access key
            timeout: Socket timeout per request, in seconds
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout

    def fetch_issues(
        self,
        *,
        project_id: int | None,
        assigned_to: str | None,
        status_open_only: bool,
        limit: int,
        offset: int,
    ) -> list[Issue]:
        params: dict[str, str] = {}
        if project_id is not None and project_id > 0:
            params["project_id"] = str(project_id)
        if assigned_to:
            params["assigned_to_id"] = assigned_to
        if status_open_only:
            params["status_id"] = "open"
        params["limit"] = str(limit)
        params["offset"] = str(offset)

        data = self._request("GET", "/issues.json", params=params)
        return _parse(
            "/issues.json", lambda: [parse_issue(item) for item in data.get("issues", [])]
        )

    def fetch_issue(self, issue_id: int) -> Issue:
        data = self._request("GET", f"/issues/{issue_id}.json", params={"include": "journals"})
        return _parse(f"/issues/{issue_id}.json", lambda: parse_issue(data["issue"]))

    def fetch_users(self, *, limit: int, offset: int) -> list[User]:
        data = self._request(
            "GET", "/users.json", params={"limit": str(limit), "offset": str(offset)}
        )
        return _parse(
            "/users.json", lambda: [parse_user(item) for item in data.get("users", [])]
        )

    def fetch_projects(self, *, limit: int, offset: int) -> list[Project]:
        data = self._request(
            "GET", "/projects.json", params={"limit": str(limit), "offset": str(offset)}
        )
        return _parse(
            "/projects.json", lambda: [parse_project(item) for item in data.get("projects", [])]
        )

    def fetch_statuses(self) -> list[Status]:
        data = self._request("GET", "/issue_statuses.json", params={})
        return _parse(
            "/issue_statuses.json",
            lambda: [parse_status(item) for item in data.get("issue_statuses", [])],
        )

    def fetch_priorities(self) -> list[Priority]:
        data = self._request("GET", "/enumerations/issue_priorities.json", params={})
        return _parse(
            "/enumerations/issue_priorities.json",
            lambda: [parse_priority(item) for item in data.get("issue_priorities", [])],
        )

    def fetch_current_user(self) -> User:
        data = self._request("GET", "/users/current.json", params={})
        return _parse("/users/current.json", lambda: parse_user(data["user"]))

    def update_issue(self, issue_id: int, fields: dict[str, Any]) -> None:
        logger.info("Updating issue %d fields=%s", issue_id, sorted(fields))
        self._request("PUT", f"/issues/{issue_id}.json", params={}, body={"issue": fields})

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str],
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and decode the JSON response.

        Args:
            method: HTTP method
            path: Path below the base URL, starting with "/"
            params: Query string parameters
            body: JSON body, or None for no body

        Returns:
            Decoded JSON object, or an empty dict for empty responses
            (Redmine answers PUT with 204 No Content)

        Raises:
            RedmineApiError: If the server returns status >= 400
            RedmineConnectionError: If the server cannot be reached or the
                response is not valid JSON
        """
        url = f"{self._base_url}{path}"
        if params:
            url += "?" + urllib.parse.urlencode(params)

        data = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")

        request = urllib.request.Request(
            url,
            data=data,
            method=method,
            headers={
                "X-Redmine-API-Key": self._api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

        logger.debug("%s %s", method, url)
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                raw = response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            text = e.read().decode("utf-8", errors="replace") if e.fp else ""
            message = text if text else str(e.reason)
            logger.warning("%s %s failed with status %d", method, path, e.code)
            raise RedmineApiError(status_code=e.code, message=message) from e
        except urllib.error.URLError as e:
            logger.warning("%s %s unreachable: %s", method, path, e.reason)
            raise RedmineConnectionError(f"Could not reach {self._base_url}: {e.reason}") from e
        except TimeoutError as e:
            raise RedmineConnectionError(f"Request to {self._base_url} timed out") from e
        except (OSError, http.client.HTTPException) as e:
            # Dropped connections surface from getresponse() or read()
            logger.warning("%s %s connection failed: %r", method, path, e)
            raise RedmineConnectionError(f"Connection to {self._base_url} failed: {e!r}") from e
        except UnicodeDecodeError as e:
            raise RedmineConnectionError(f"Response from {path} is not UTF-8: {e}") from e

        if not raw.strip():
            return {}
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as e:
            raise RedmineConnectionError(f"Invalid JSON from {path}: {e}") from e
        if not isinstance(decoded, dict):
            raise RedmineConnectionError(f"Unexpected response shape from {path}")
        return decoded


def _parse(path: str, parse: Callable[[], T]) -> T:
    """Run a response parser, reporting malformed payloads as connection errors.

    Args:
        path: Request path, for the error message
        parse: Parser over the already decoded response

    Returns:
        The parsed value

    Raises:
        RedmineConnectionError: If the payload lacks a key or has the wrong types
    """
    try:
        return parse()
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Unexpected response shape from %s: %r", path, e)
        raise RedmineConnectionError(f"Unexpected response shape from {path}: {e!r}") from e
