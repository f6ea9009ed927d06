"""Data models for the Bitbucket Server pull-request API."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class PullRequestState(StrEnum):
    """State filter for listing pull requests."""

    OPEN = "OPEN"
    MERGED = "MERGED"
    DECLINED = "DECLINED"
    ALL = "ALL"


class Order(StrEnum):
    """Sort order for listing pull requests."""

    OLDEST = "OLDEST"
    NEWEST = "NEWEST"


class WhitespaceMode(StrEnum):
    """Whether whitespace-only changes show up in a diff."""

    INCLUDE = "show"
    IGNORE_ALL = "ignore-all"


class CommentMode(StrEnum):
    """Whether comments are embedded in a diff."""

    WITH_COMMENTS = "true"
    WITHOUT_COMMENTS = "false"


class ApiModel(BaseModel):
    """Base for every entity decoded from (or encoded to) the REST API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class PagedResponse(ApiModel, Generic[T]):
    """One page of a larger result set."""

    size: int
    limit: int
    is_last_page: bool
    start: int
    next_page_start: int | None = None
    values: list[T] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_cursor(self) -> PagedResponse[T]:
        """A page that isn't the last must point strictly forward."""
        if not self.is_last_page:
            if self.next_page_start is None:
                raise ValueError("nextPageStart is required when isLastPage is false")
            if self.next_page_start <= self.start:
                raise ValueError(
                    f"nextPageStart {self.next_page_start} does not advance past start {self.start}"
                )
        return self


class User(ApiModel):
    """A Bitbucket user."""

    name: str
    email_address: str | None = None
    id: int
    display_name: str
    slug: str | None = None


class PullRequestAuthor(ApiModel):
    """A user in a participant role on a pull request."""

    user: User
    role: str | None = None
    approved: bool = False

    @property
    def name(self) -> str:
        return self.user.name


class PullRequest(ApiModel):
    """Information about a pull request."""

    id: int
    version: int | None = None
    title: str = ""
    description: str | None = None
    state: str | None = None
    open: bool = False
    closed: bool
    author: PullRequestAuthor
    reviewers: list[PullRequestAuthor] = Field(default_factory=list)
    created_at: datetime = Field(alias="createdDate")
    updated_at: datetime = Field(alias="updatedDate")


class PullRequestComment(ApiModel):
    """A comment and its replies."""

    id: int
    text: str
    author: User
    comments: list[PullRequestComment] = Field(default_factory=list)
    created_at: datetime = Field(alias="createdDate")

    def iter_thread(self) -> Iterator[PullRequestComment]:
        """Yield this comment and every reply below it, depth first."""
        yield self
        for reply in self.comments:
            yield from reply.iter_thread()


class PullRequestActivity(ApiModel):
    """An entry in a pull request's activity feed."""

    id: int
    user: User
    action: str
    comment: PullRequestComment | None = None
    comment_action: str | None = None
    created_at: datetime = Field(alias="createdDate")


class PullRequestCommitAuthor(ApiModel):
    """Git author of a commit; not necessarily a Bitbucket user."""

    name: str
    email_address: str | None = None


class PullRequestCommit(ApiModel):
    """A commit that is part of a pull request."""

    id: str
    display_id: str | None = None
    author: PullRequestCommitAuthor
    message: str
    created_at: datetime = Field(alias="authorTimestamp")


class PullRequestFilePath(ApiModel):
    components: list[str]
    name: str
    full_path: str = Field(alias="toString")


class PullRequestHunk(ApiModel):
    source_line: int
    source_span: int
    destination_line: int
    destination_span: int


class PullRequestDiff(ApiModel):
    """Diff of a single file. source is None for added files, destination for deleted ones."""

    source: PullRequestFilePath | None = None
    destination: PullRequestFilePath | None = None
    hunks: list[PullRequestHunk] | None = None
    truncated: bool = False


class PullRequestDiffResponse(ApiModel):
    from_hash: str
    to_hash: str
    diffs: list[PullRequestDiff] = Field(default_factory=list)


class Project(ApiModel):
    key: str


class Repo(ApiModel):
    project: Project
    slug: str


class Ref(ApiModel):
    id: str
    repo: Repo


class NewPullRequest(ApiModel):
    """Request body for creating a pull request."""

    title: str
    description: str
    from_ref: Ref
    to_ref: Ref

    @classmethod
    def build(
        cls,
        project_key: str,
        repo_slug: str,
        title: str,
        description: str,
        from_id: str,
        to_id: str,
    ) -> NewPullRequest:
        """Create a body whose refs both live in the same repository."""
        repo = Repo(project=Project(key=project_key), slug=repo_slug)
        return cls(
            title=title,
            description=description,
            from_ref=Ref(id=from_id, repo=repo),
            to_ref=Ref(id=to_id, repo=repo),
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class ClientConfig(BaseModel):
    """Connection settings for a Bitbucket Server instance."""

    url: str
    username: str | None = None
    password: str | None = None
    timeout: float = Field(default=30.0, gt=0)
    max_pages: int | None = Field(default=None, ge=1)

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and self.password is not None
