"""Typed webhook event payloads and the event-name lookup table.

Nested API objects (repositories, users, issues...) are kept as plain
dictionaries; resource schemas are outside this package. Every field is
optional, and a field the payload did not carry stays None.
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, ClassVar

JSONObject = dict[str, Any]


@dataclass
class Event:
    """Base class for webhook payloads."""

    event_type: ClassVar[str] = ""

    @classmethod
    def from_payload(cls, data: JSONObject) -> "Event":
        """Build the event from a decoded payload, ignoring unknown keys."""
        names = {f.name for f in dataclasses.fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in names})


@dataclass
class CommitCommentEvent(Event):
    event_type: ClassVar[str] = "commit_comment"

    comment: JSONObject | None = None
    action: str | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class CreateEvent(Event):
    """A repository, branch or tag was created."""

    event_type: ClassVar[str] = "create"

    ref: str | None = None
    ref_type: str | None = None
    master_branch: str | None = None
    description: str | None = None
    pusher_type: str | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class DeleteEvent(Event):
    event_type: ClassVar[str] = "delete"

    ref: str | None = None
    ref_type: str | None = None
    pusher_type: str | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class DeploymentEvent(Event):
    event_type: ClassVar[str] = "deployment"

    deployment: JSONObject | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class DeploymentStatusEvent(Event):
    event_type: ClassVar[str] = "deployment_status"

    deployment: JSONObject | None = None
    deployment_status: JSONObject | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class ForkEvent(Event):
    event_type: ClassVar[str] = "fork"

    # The newly created repository
    forkee: JSONObject | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class GollumEvent(Event):
    """Wiki pages created or updated."""

    event_type: ClassVar[str] = "gollum"

    pages: list[JSONObject] | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class InstallationEvent(Event):
    event_type: ClassVar[str] = "installation"

    action: str | None = None
    installation: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class InstallationRepositoriesEvent(Event):
    event_type: ClassVar[str] = "installation_repositories"

    action: str | None = None
    installation: JSONObject | None = None
    repositories_added: list[JSONObject] | None = None
    repositories_removed: list[JSONObject] | None = None
    sender: JSONObject | None = None


@dataclass
class IssueCommentEvent(Event):
    event_type: ClassVar[str] = "issue_comment"

    action: str | None = None
    issue: JSONObject | None = None
    comment: JSONObject | None = None
    changes: JSONObject | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class IssuesEvent(Event):
    event_type: ClassVar[str] = "issues"

    action: str | None = None
    issue: JSONObject | None = None
    assignee: JSONObject | None = None
    label: JSONObject | None = None
    changes: JSONObject | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class LabelEvent(Event):
    event_type: ClassVar[str] = "label"

    action: str | None = None
    label: JSONObject | None = None
    changes: JSONObject | None = None
    repository: JSONObject | None = None
    organization: JSONObject | None = None


@dataclass
class MemberEvent(Event):
    event_type: ClassVar[str] = "member"

    action: str | None = None
    member: JSONObject | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class MembershipEvent(Event):
    event_type: ClassVar[str] = "membership"

    action: str | None = None
    scope: str | None = None
    member: JSONObject | None = None
    team: JSONObject | None = None
    organization: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class MilestoneEvent(Event):
    event_type: ClassVar[str] = "milestone"

    action: str | None = None
    milestone: JSONObject | None = None
    changes: JSONObject | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None
    organization: JSONObject | None = None


@dataclass
class PageBuildEvent(Event):
    event_type: ClassVar[str] = "page_build"

    build: JSONObject | None = None
    id: int | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class PingEvent(Event):
    """Sent once when a hook is created."""

    event_type: ClassVar[str] = "ping"

    zen: str | None = None
    hook_id: int | None = None
    hook: JSONObject | None = None


@dataclass
class PublicEvent(Event):
    event_type: ClassVar[str] = "public"

    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class PullRequestEvent(Event):
    event_type: ClassVar[str] = "pull_request"

    action: str | None = None
    number: int | None = None
    pull_request: JSONObject | None = None
    changes: JSONObject | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class PullRequestReviewEvent(Event):
    event_type: ClassVar[str] = "pull_request_review"

    action: str | None = None
    review: JSONObject | None = None
    pull_request: JSONObject | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None
    organization: JSONObject | None = None


@dataclass
class PullRequestReviewCommentEvent(Event):
    event_type: ClassVar[str] = "pull_request_review_comment"

    action: str | None = None
    pull_request: JSONObject | None = None
    comment: JSONObject | None = None
    changes: JSONObject | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class PushEvent(Event):
    event_type: ClassVar[str] = "push"

    push_id: int | None = None
    head: str | None = None
    ref: str | None = None
    size: int | None = None
    commits: list[JSONObject] | None = None
    before: str | None = None
    distinct_size: int | None = None
    after: str | None = None
    created: bool | None = None
    deleted: bool | None = None
    forced: bool | None = None
    base_ref: str | None = None
    compare: str | None = None
    head_commit: JSONObject | None = None
    pusher: JSONObject | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class ReleaseEvent(Event):
    event_type: ClassVar[str] = "release"

    action: str | None = None
    release: JSONObject | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class RepositoryEvent(Event):
    event_type: ClassVar[str] = "repository"

    action: str | None = None
    repository: JSONObject | None = None
    organization: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class StatusEvent(Event):
    """Commit status changed."""

    event_type: ClassVar[str] = "status"

    sha: str | None = None
    state: str | None = None
    description: str | None = None
    target_url: str | None = None
    branches: list[JSONObject] | None = None
    id: int | None = None
    name: str | None = None
    context: str | None = None
    commit: JSONObject | None = None
    created_at: str | None = None
    updated_at: str | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class TeamAddEvent(Event):
    event_type: ClassVar[str] = "team_add"

    team: JSONObject | None = None
    repository: JSONObject | None = None
    organization: JSONObject | None = None
    sender: JSONObject | None = None


@dataclass
class WatchEvent(Event):
    """A repository was starred."""

    event_type: ClassVar[str] = "watch"

    action: str | None = None
    repository: JSONObject | None = None
    sender: JSONObject | None = None


EVENT_TYPES: dict[str, type[Event]] = {
    cls.event_type: cls
    for cls in (
        CommitCommentEvent,
        CreateEvent,
        DeleteEvent,
        DeploymentEvent,
        DeploymentStatusEvent,
        ForkEvent,
        GollumEvent,
        InstallationEvent,
        InstallationRepositoriesEvent,
        IssueCommentEvent,
        IssuesEvent,
        LabelEvent,
        MemberEvent,
        MembershipEvent,
        MilestoneEvent,
        PageBuildEvent,
        PingEvent,
        PublicEvent,
        PullRequestEvent,
        PullRequestReviewEvent,
        PullRequestReviewCommentEvent,
        PushEvent,
        ReleaseEvent,
        RepositoryEvent,
        StatusEvent,
        TeamAddEvent,
        WatchEvent,
    )
}
