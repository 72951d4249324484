"""GitHub REST API adapter."""

import logging
import time
from typing import Any, Callable, Dict, List
from urllib.parse import quote

import requests

from qa_retention.adapters.base import TrackerAdapter, TrackerError
from qa_retention.models import Comment, Issue

LOG = logging.getLogger("qa_retention.adapters.github")

PER_PAGE = 100
RATE_LIMIT_RETRIES = 3
RATE_LIMIT_WAIT_SECONDS = 60.0


def _issue_from_api(data: Dict[str, Any]) -> Issue:
    user = data.get("user") or {}
    labels = [lb["name"] for lb in (data.get("labels") or []) if isinstance(lb, dict) and lb.get("name")]
    return Issue(
        number=data["number"],
        title=data.get("title") or "",
        body=data.get("body") or "",
        author=user.get("login", ""),
        labels=labels,
        state=data.get("state", "open"),
        created_at=data.get("created_at"),
        updated_at=data.get("updated_at"),
    )


def _comment_from_api(data: Dict[str, Any]) -> Comment:
    user = data.get("user") or {}
    return Comment(
        id=data.get("id"),
        body=data.get("body") or "",
        author=user.get("login", ""),
        created_at=data.get("created_at"),
        updated_at=data.get("updated_at") or data.get("created_at"),
    )


def _is_rate_limited(resp: requests.Response) -> bool:
    if resp.status_code == 429:
        return True
    if resp.status_code != 403:
        return False
    if resp.headers.get("X-RateLimit-Remaining") == "0":
        return True
    return "rate limit" in (resp.text or "").lower()


def _retry_after(resp: requests.Response) -> float:
    try:
        return max(float(resp.headers.get("Retry-After")), 0.0)
    except (TypeError, ValueError):
        return RATE_LIMIT_WAIT_SECONDS


def _error_message(resp: requests.Response) -> str:
    msg = resp.text or resp.reason or str(resp.status_code)
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        msg = data["message"]
    return msg


class GitHubAdapter(TrackerAdapter):
    """GitHub API implementation.

    Retries rate-limited requests (waiting Retry-After or one minute) and
    follows Link pagination for list endpoints.
    """

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.github.com",
        sleep: Callable[[float], None] = time.sleep,
        timeout: int = 30,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._sleep = sleep
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )

    def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
        json: Dict[str, Any] | None = None,
    ) -> requests.Response:
        if path.startswith("http"):
            url = path
        else:
            url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        retries = RATE_LIMIT_RETRIES
        while True:
            resp = self._session.request(method, url, params=params, json=json, timeout=self._timeout)
            if not (_is_rate_limited(resp) and retries > 0):
                break
            wait = _retry_after(resp)
            LOG.warning("Rate limit hit on %s %s, retrying after %.0fs (%s retries left)", method, path, wait, retries)
            self._sleep(wait)
            retries -= 1
        if resp.status_code >= 400:
            raise TrackerError(f"{resp.status_code}: {_error_message(resp)}", status_code=resp.status_code)
        LOG.debug(
            "%s %s - rate limit %s/%s",
            method,
            path,
            resp.headers.get("X-RateLimit-Remaining"),
            resp.headers.get("X-RateLimit-Limit"),
        )
        return resp

    def _paginate(self, path: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """GET every page of a list endpoint."""
        items: List[Dict[str, Any]] = []
        resp = self._request("GET", path, params={**params, "per_page": PER_PAGE})
        while True:
            items.extend(resp.json() or [])
            links = getattr(resp, "links", None)
            next_url = links.get("next", {}).get("url") if isinstance(links, dict) else None
            if not next_url:
                return items
            resp = self._request("GET", next_url)

    def list_open_issues(self, repo: str) -> List[Issue]:
        return self.list_issues(repo, state="open")

    def list_issues(self, repo: str, state: str = "all") -> List[Issue]:
        """List issues in the given state; /issues also returns PRs, which are skipped."""
        data_list = self._paginate(f"/repos/{repo}/issues", {"state": state})
        return [_issue_from_api(d) for d in data_list if d.get("pull_request") is None]

    def get_issue_comments(self, repo: str, issue_number: int) -> List[Comment]:
        data_list = self._paginate(f"/repos/{repo}/issues/{issue_number}/comments", {})
        return [_comment_from_api(d) for d in data_list]

    def create_comment(self, repo: str, issue_number: int, body: str) -> Comment:
        resp = self._request("POST", f"/repos/{repo}/issues/{issue_number}/comments", json={"body": body})
        return _comment_from_api(resp.json())

    def add_labels(self, repo: str, issue_number: int, labels: List[str]) -> None:
        self._request("POST", f"/repos/{repo}/issues/{issue_number}/labels", json={"labels": labels})

    def remove_label(self, repo: str, issue_number: int, label: str) -> None:
        self._request("DELETE", f"/repos/{repo}/issues/{issue_number}/labels/{quote(label, safe='')}")

    def set_issue_state(
        self,
        repo: str,
        issue_number: int,
        state: str,
        state_reason: str | None = None,
    ) -> None:
        payload: Dict[str, Any] = {"state": state}
        if state_reason:
            payload["state_reason"] = state_reason
        self._request("PATCH", f"/repos/{repo}/issues/{issue_number}", json=payload)

    def create_issue(self, repo: str, title: str, body: str) -> Issue:
        resp = self._request("POST", f"/repos/{repo}/issues", json={"title": title, "body": body})
        return _issue_from_api(resp.json())
