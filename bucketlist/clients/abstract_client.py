"""Abstract client for the Bitbucket Server pull-request API."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from bucketlist.models import Order

if TYPE_CHECKING:
    from bucketlist.models import (
        CommentMode,
        PagedResponse,
        PullRequest,
        PullRequestActivity,
        PullRequestCommit,
        PullRequestDiffResponse,
        PullRequestState,
        WhitespaceMode,
    )
    from bucketlist.stream import ReplayStream


class AbstractBucketListClient(ABC):
    """Client for the pull requests of one Bitbucket Server instance.

    Every operation returns immediately with a ``ReplayStream``; the requests
    run in the background on the current event loop.
    """

    @abstractmethod
    def get_prs(
        self,
        project_key: str,
        repo_slug: str,
        state: PullRequestState,
        order: Order = Order.NEWEST,
    ) -> ReplayStream[PagedResponse[PullRequest]]:
        """Pages of pull requests, newest first unless ``order`` says otherwise."""

    @abstractmethod
    def get_pr(self, project_key: str, repo_slug: str, pr_id: int) -> ReplayStream[PullRequest]:
        """A stream that emits a single pull request."""

    @abstractmethod
    def get_pr_activity(
        self, project_key: str, repo_slug: str, pr_id: int
    ) -> ReplayStream[PagedResponse[PullRequestActivity]]:
        """Pages of activity, in the order the server returns them (newest first)."""

    @abstractmethod
    def get_pr_commits(
        self, project_key: str, repo_slug: str, pr_id: int
    ) -> ReplayStream[PagedResponse[PullRequestCommit]]: ...

    @abstractmethod
    def get_pr_diff(
        self,
        project_key: str,
        repo_slug: str,
        pr_id: int,
        context_lines: int,
        whitespace_mode: WhitespaceMode,
        comment_mode: CommentMode,
    ) -> ReplayStream[PullRequestDiffResponse]:
        """
        A stream that emits the diff of a pull request.

        Args:
            context_lines: Lines of context around each change, at least 0
            whitespace_mode: Show or ignore whitespace-only changes
            comment_mode: Whether to embed comments in the diff

        """

    @abstractmethod
    def create_pr(
        self,
        project_key: str,
        repo_slug: str,
        title: str,
        description: str,
        from_id: str,
        to_id: str,
    ) -> ReplayStream[PullRequest]:
        """
        Open a pull request within one repository.

        Args:
            from_id: Source ref, e.g. "refs/heads/some-new-branch"
            to_id: Destination ref, e.g. "refs/heads/master"

        """
