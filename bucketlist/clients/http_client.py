"""Bitbucket Server pull-request client over a shared httpx transport."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from typing_extensions import override

from bucketlist.authenticators import Authenticator
from bucketlist.clients.abstract_client import AbstractBucketListClient
from bucketlist.handlers import (
    Continuation,
    Paginator,
    ResponseConsumer,
    ResponseHandler,
    SingleShot,
)
from bucketlist.models import (
    CommentMode,
    NewPullRequest,
    Order,
    PagedResponse,
    PullRequest,
    PullRequestActivity,
    PullRequestCommit,
    PullRequestDiffResponse,
    PullRequestState,
    WhitespaceMode,
)
from bucketlist.stream import ReplayStream

logger = logging.getLogger(__name__)


class HttpBucketListClient(AbstractBucketListClient):
    """Client for the Bitbucket Server REST API (``/rest/api/1.0``)."""

    def __init__(
        self,
        base_url: str,
        authenticator: Authenticator,
        http_client: httpx.AsyncClient,
        max_pages: int | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Root of the Bitbucket Server instance, e.g. "https://git.example.com"
            authenticator: Applied to every outgoing request
            http_client: Shared by every stream this client creates
            max_pages: Fail paged streams that go on longer than this; None for no limit

        """
        self.base_url = base_url.rstrip("/")
        self.authenticator = authenticator
        self.http_client = http_client
        self.max_pages = max_pages

    @override
    def get_prs(
        self,
        project_key: str,
        repo_slug: str,
        state: PullRequestState,
        order: Order = Order.NEWEST,
    ) -> ReplayStream[PagedResponse[PullRequest]]:
        url = self._url(*self._prs_path(project_key, repo_slug))
        state_param = PullRequestState(state).value
        order_param = Order(order).value

        def request_for(start: int) -> httpx.Request:
            return self._request(
                "GET", url, params={"state": state_param, "start": start, "order": order_param}
            )

        return self._stream(PagedResponse[PullRequest], Paginator(request_for, self.max_pages))

    @override
    def get_pr(self, project_key: str, repo_slug: str, pr_id: int) -> ReplayStream[PullRequest]:
        url = self._url(*self._prs_path(project_key, repo_slug), pr_id)
        return self._stream(PullRequest, SingleShot(self._request("GET", url)))

    @override
    def get_pr_activity(
        self, project_key: str, repo_slug: str, pr_id: int
    ) -> ReplayStream[PagedResponse[PullRequestActivity]]:
        url = self._url(*self._prs_path(project_key, repo_slug), pr_id, "activities")
        return self._stream(PagedResponse[PullRequestActivity], self._paginate(url))

    @override
    def get_pr_commits(
        self, project_key: str, repo_slug: str, pr_id: int
    ) -> ReplayStream[PagedResponse[PullRequestCommit]]:
        url = self._url(*self._prs_path(project_key, repo_slug), pr_id, "commits")
        return self._stream(PagedResponse[PullRequestCommit], self._paginate(url))

    @override
    def get_pr_diff(
        self,
        project_key: str,
        repo_slug: str,
        pr_id: int,
        context_lines: int,
        whitespace_mode: WhitespaceMode,
        comment_mode: CommentMode,
    ) -> ReplayStream[PullRequestDiffResponse]:
        if context_lines < 0:
            raise ValueError(f"context_lines must be >= 0, got {context_lines}")

        url = self._url(*self._prs_path(project_key, repo_slug), pr_id, "diff")
        params = {
            "contextLines": context_lines,
            "whitespace": WhitespaceMode(whitespace_mode).value,
            "withComments": CommentMode(comment_mode).value,
        }
        request = self._request("GET", url, params=params)
        return self._stream(PullRequestDiffResponse, SingleShot(request))

    @override
    def create_pr(
        self,
        project_key: str,
        repo_slug: str,
        title: str,
        description: str,
        from_id: str,
        to_id: str,
    ) -> ReplayStream[PullRequest]:
        url = self._url(*self._prs_path(project_key, repo_slug))
        body = NewPullRequest.build(project_key, repo_slug, title, description, from_id, to_id)

        logger.debug(f"Creating PR {from_id} -> {to_id} in {project_key}/{repo_slug}")
        request = self._request(
            "POST",
            url,
            content=body.to_json(),
            headers={"Content-Type": "application/json"},
        )
        return self._stream(PullRequest, SingleShot(request))

    def _prs_path(self, project_key: str, repo_slug: str) -> tuple[str, ...]:
        return ("rest", "api", "1.0", "projects", project_key, "repos", repo_slug, "pull-requests")

    def _url(self, *segments: str | int) -> str:
        path = "/".join(quote(str(segment), safe="") for segment in segments)
        return f"{self.base_url}/{path}"

    def _paginate(self, url: str) -> Paginator:
        def request_for(start: int) -> httpx.Request:
            return self._request("GET", url, params={"start": start})

        return Paginator(request_for, self.max_pages)

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Request:
        request = self.http_client.build_request(method, url, **kwargs)
        return self.authenticator.authenticate(request)

    def _stream(self, target: Any, continuation: Continuation) -> ReplayStream[Any]:
        handler: ResponseHandler[Any] = ResponseHandler(self.http_client, target, ReplayStream())
        return ResponseConsumer(handler, continuation).start()
