"""
Close and reopen issues and pull requests from comment commands.

A comment with a line of ``/close`` closes the open issue or pull request it
was made on.  A line of ``/reopen`` reopens a closed issue.  Only the author
of the issue or pull request, or a collaborator on the repo, can do this.
Anyone else gets a comment explaining why nothing happened.
"""

from __future__ import annotations

import enum

from lifecycle_webhooks import celery
from lifecycle_webhooks.bot_comments import (
    closed_comment,
    no_permission_comment,
    reopened_comment,
)
from lifecycle_webhooks.client import GitHubClient
from lifecycle_webhooks.commands import Command, has_command
from lifecycle_webhooks.info import (
    ConfigurationError,
    LifecycleConfig,
    RepoConfigItem,
    get_lifecycle_config,
)
from lifecycle_webhooks.tasks import logger
from lifecycle_webhooks.types import IssueTarget, NoteEvent, PullRequestTarget, WebhookDict
from lifecycle_webhooks.utils import queue_task


class Outcome(enum.Enum):
    """What handling a comment event did."""
    IGNORED = "ignored"
    REJECTED = "rejected"
    CLOSED = "closed"
    REOPENED = "reopened"


@celery.task(bind=True)
def note_event_task(_, event: WebhookDict):
    """A bound Celery task to call handle_note_event."""
    try:
        outcome = handle_note_event(NoteEvent.from_webhook(event), get_lifecycle_config())
    except Exception:
        logger.exception("Couldn't note_event_task")
        raise
    return outcome.value


def queue_note_event(event: WebhookDict):
    """A webhook handler to run note_event_task in the background."""
    return queue_task(note_event_task, event)


def register_event_handler(registry) -> None:
    """Subscribe the lifecycle bot to newly created comments."""
    registry.register_note_event_handler(queue_note_event)


def handle_note_event(event: NoteEvent, config: LifecycleConfig, client=None) -> Outcome:
    """
    Act on the lifecycle commands in a comment.

    `client` performs the GitHub operations, a GitHubClient if not provided.
    Errors from GitHub are raised, not reported as outcomes.
    """
    if not event.is_creating_comment:
        logger.debug("Event is not a creation of a comment for PR or issue, skipping.")
        return Outcome.IGNORED

    if not isinstance(config, LifecycleConfig):
        raise ConfigurationError(f"Can't use {config!r} as a lifecycle configuration")

    repo_config = config.config_for(event.org, event.repo)
    if repo_config is None:
        logger.debug(f"Ignoring comment on {event}: no configuration for {event.full_name}")
        return Outcome.IGNORED

    fixer = LifecycleFixer(event, repo_config, client=client or GitHubClient())
    match event.target:
        case PullRequestTarget():
            return fixer.handle_pull_request()
        case IssueTarget():
            return fixer.handle_issue()
        case _:
            return Outcome.IGNORED


class LifecycleFixer:
    """
    Make the changes one comment asks for.
    """

    def __init__(self, event: NoteEvent, repo_config: RepoConfigItem, client) -> None:
        self.event = event
        self.repo_config = repo_config
        self.client = client

    def handle_pull_request(self) -> Outcome:
        target = self.event.target
        if not target.is_open or not has_command(self.event.body, Command.CLOSE):
            return Outcome.IGNORED

        org, repo, commenter = self.event.org, self.event.repo, self.event.commenter
        logger.info(f"@{commenter} asked to close pull request {self.event}")
        if not self.has_permission():
            self.client.create_pull_request_comment(
                org, repo, target.number, no_permission_comment(commenter, "close", target),
            )
            return Outcome.REJECTED

        self.client.close_pull_request(org, repo, target.number)
        if self.repo_config.comment_on_pr_close:
            self.client.create_pull_request_comment(
                org, repo, target.number, closed_comment(commenter, target),
            )
        return Outcome.CLOSED

    def handle_issue(self) -> Outcome:
        target = self.event.target
        body = self.event.body

        if not target.is_open and has_command(body, Command.REOPEN):
            return self._change_issue("reopen", self.client.reopen_issue, reopened_comment, Outcome.REOPENED)

        if target.is_open and has_command(body, Command.CLOSE):
            return self._change_issue("close", self.client.close_issue, closed_comment, Outcome.CLOSED)

        return Outcome.IGNORED

    def _change_issue(self, action, change, make_comment, outcome) -> Outcome:
        org, repo, commenter = self.event.org, self.event.repo, self.event.commenter
        number = self.event.target.number
        logger.info(f"@{commenter} asked to {action} issue {self.event}")
        if not self.has_permission():
            self.client.create_issue_comment(
                org, repo, number, no_permission_comment(commenter, action, self.event.target),
            )
            return Outcome.REJECTED

        change(org, repo, number)
        self.client.create_issue_comment(org, repo, number, make_comment(commenter, self.event.target))
        return outcome

    def has_permission(self) -> bool:
        """Is the commenter the author of the target, or a collaborator?"""
        if self.event.commenter == self.event.target.author:
            return True
        return self.client.is_collaborator(self.event.org, self.event.repo, self.event.commenter)
