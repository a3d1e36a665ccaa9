"""Types specific to lifecycle_webhooks."""

from __future__ import annotations

import dataclasses
from typing import Dict, Literal, Union

from glom import glom

# A webhook payload as described by a JSON object.
WebhookDict = Dict

# An issue or pull request as described by the "issue" key of a comment
# webhook, or by the REST API's issue endpoint.
IssueDict = Dict

# A comment as described by a JSON object.
CommentDict = Dict

TargetState = Literal["open", "closed"]


@dataclasses.dataclass(frozen=True)
class IssueTarget:
    """An issue that a comment was made on."""
    number: int
    author: str
    state: TargetState

    kind = "issue"

    @property
    def is_open(self) -> bool:
        return self.state == "open"


@dataclasses.dataclass(frozen=True)
class PullRequestTarget:
    """A pull request that a comment was made on."""
    number: int
    author: str
    state: TargetState

    kind = "pull request"

    @property
    def is_open(self) -> bool:
        return self.state == "open"


NoteTarget = Union[IssueTarget, PullRequestTarget]


def target_from_issue_dict(issue: IssueDict) -> NoteTarget:
    """
    Make a target from GitHub's JSON for an issue.

    GitHub reports comments on pull requests as comments on issues, with an
    extra "pull_request" key on the issue.
    """
    cls = PullRequestTarget if issue.get("pull_request") else IssueTarget
    return cls(
        number=issue["number"],
        author=glom(issue, "user.login"),
        state=issue["state"],
    )


@dataclasses.dataclass(frozen=True)
class NoteEvent:
    """
    A comment made on an issue or pull request.

    `action` is the webhook action: "created", "edited", or "deleted".
    """
    action: str
    org: str
    repo: str
    commenter: str
    body: str
    target: NoteTarget

    @classmethod
    def from_webhook(cls, event: WebhookDict) -> NoteEvent:
        """Make a NoteEvent from an `issue_comment` webhook payload."""
        return cls.from_issue_and_comment(
            action=event["action"],
            repository=event["repository"],
            issue=event["issue"],
            comment=event["comment"],
        )

    @classmethod
    def from_issue_and_comment(
        cls,
        action: str,
        repository: Dict,
        issue: IssueDict,
        comment: CommentDict,
    ) -> NoteEvent:
        return cls(
            action=action,
            org=glom(repository, "owner.login"),
            repo=repository["name"],
            commenter=glom(comment, "user.login"),
            body=comment.get("body") or "",
            target=target_from_issue_dict(issue),
        )

    @property
    def is_creating_comment(self) -> bool:
        return self.action == "created"

    @property
    def full_name(self) -> str:
        return f"{self.org}/{self.repo}"

    def __str__(self):
        return f"{self.full_name}#{self.target.number}"
