"""Inbound webhook verification and typed event dispatch.

Example:
    ```python
    from github_client_core.webhooks import PushEvent, WebhookEnvelope

    envelope = WebhookEnvelope.from_headers(request.headers, await request.body())
    event = envelope.parse(secret)
    match event:
        case PushEvent():
            ...
    ```
"""

from github_client_core.webhooks.envelope import (
    HEADER_DELIVERY,
    HEADER_EVENT,
    WebhookEnvelope,
    parse_event,
)
from github_client_core.webhooks.events import (
    EVENT_TYPES,
    CommitCommentEvent,
    CreateEvent,
    DeleteEvent,
    DeploymentEvent,
    DeploymentStatusEvent,
    Event,
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
    PullRequestReviewCommentEvent,
    PullRequestReviewEvent,
    PushEvent,
    ReleaseEvent,
    RepositoryEvent,
    StatusEvent,
    TeamAddEvent,
    WatchEvent,
)
from github_client_core.webhooks.exceptions import (
    MalformedSignatureError,
    MissingSignatureError,
    PayloadDecodeError,
    SignatureError,
    SignatureMismatchError,
    UnknownAlgorithmError,
    UnknownEventTypeError,
    WebhookError,
)
from github_client_core.webhooks.signature import HEADER_SIGNATURE, compute_signature, validate_signature

__all__ = [
    "EVENT_TYPES",
    "HEADER_DELIVERY",
    "HEADER_EVENT",
    "HEADER_SIGNATURE",
    "CommitCommentEvent",
    "CreateEvent",
    "DeleteEvent",
    "DeploymentEvent",
    "DeploymentStatusEvent",
    "Event",
    "ForkEvent",
    "GollumEvent",
    "InstallationEvent",
    "InstallationRepositoriesEvent",
    "IssueCommentEvent",
    "IssuesEvent",
    "LabelEvent",
    "MalformedSignatureError",
    "MemberEvent",
    "MembershipEvent",
    "MilestoneEvent",
    "MissingSignatureError",
    "PageBuildEvent",
    "PayloadDecodeError",
    "PingEvent",
    "PublicEvent",
    "PullRequestEvent",
    "PullRequestReviewCommentEvent",
    "PullRequestReviewEvent",
    "PushEvent",
    "ReleaseEvent",
    "RepositoryEvent",
    "SignatureError",
    "SignatureMismatchError",
    "StatusEvent",
    "TeamAddEvent",
    "UnknownAlgorithmError",
    "UnknownEventTypeError",
    "WatchEvent",
    "WebhookEnvelope",
    "WebhookError",
    "compute_signature",
    "parse_event",
    "validate_signature",
]
