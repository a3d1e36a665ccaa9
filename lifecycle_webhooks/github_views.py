"""
These are the views that process webhook events coming from Github.
"""

import logging

from flask import current_app as app
from flask import Blueprint, jsonify, request

from lifecycle_webhooks.client import DryRunClient, GitHubClient
from lifecycle_webhooks.debug import is_debug, print_long_json
from lifecycle_webhooks.dispatcher import EventHandlerRegistry
from lifecycle_webhooks.info import get_bot_username, get_lifecycle_config
from lifecycle_webhooks.tasks.lifecycle import handle_note_event, register_event_handler
from lifecycle_webhooks.types import NoteEvent
from lifecycle_webhooks.utils import (
    RequestFailed, is_valid_payload, requires_auth, sentry_extra_context,
)

github_bp = Blueprint('github_views', __name__)
logger = logging.getLogger(__name__)

event_handlers = EventHandlerRegistry()
register_event_handler(event_handlers)


@github_bp.route('/hook-receiver', methods=('POST',))
def hook_receiver():
    """
    Process incoming GitHub webhook events.

    1.  Make sure the payload hashes to the proper signature. If not,
        reject the request with http status of 403.
    2.  Send a job to the queue for each handler registered for the event.
    3.  Respond with http status 202.

    Returns:
        A response, or Tuple[str, int]: Message payload and HTTP status code
    """
    signature = request.headers.get("X-Hub-Signature-256") or request.headers.get("X-Hub-Signature")
    secret = app.config.get('GITHUB_WEBHOOKS_SECRET')
    if not is_valid_payload(secret, signature, request.data):   # type: ignore[arg-type]
        msg = "Rejecting because signature doesn't match!"
        logger.info(msg)
        return msg, 403

    event = request.get_json()
    event_type = request.headers.get("X-GitHub-Event", "")

    action = event.get("action")
    repo = event.get("repository", {}).get("full_name")
    who = event.get("sender", {}).get("login", "someone")
    logger.info(f"Incoming GitHub event: {event_type=!r}, {repo=!r}, {action=!r}, {who=!r}")
    if is_debug(__name__):
        print_long_json("Incoming GitHub event", event)

    sentry_extra_context({"event": event})

    match event:
        case {"zen": _, "hook": _}:
            # this is a ping
            logger.info(f"ping from {repo}")
            return "PONG"

        case {"comment": {"user": {"login": commenter}}} if commenter == get_bot_username():
            # The bot's own comments come back to us as events. There's
            # nothing to do for them.
            return "No thanks", 202

    responses = event_handlers.dispatch(event_type, event)
    if responses:
        return responses[0]
    return "No thanks", 202


@github_bp.route("/process_comment", methods=("POST",))
@requires_auth
def process_comment():
    """
    Process (or re-process) a comment, without waiting for a webhook.

    Form fields: `repo` ("org/repo"), `comment_id`, and optionally `dry_run`
    to report what would be done instead of doing it.
    """
    repo_full_name = request.form.get("repo", "")
    if repo_full_name.count("/") != 1:
        resp = jsonify({"error": "Repo (as org/repo) required"})
        resp.status_code = 400
        return resp
    comment_id = request.form.get("comment_id")
    if not comment_id:
        resp = jsonify({"error": "Comment id required"})
        resp.status_code = 400
        return resp
    dry_run = bool(request.form.get("dry_run", False))

    org, name = repo_full_name.split("/")
    github = GitHubClient()
    try:
        comment = github.get_comment(org, name, comment_id)
    except RequestFailed as exc:
        resp = jsonify({"error": str(exc)})
        resp.status_code = 400
        return resp
    issue = github.get_commented_issue(comment)

    event = NoteEvent.from_issue_and_comment(
        action="created",
        repository={"owner": {"login": org}, "name": name},
        issue=issue,
        comment=comment,
    )
    client = DryRunClient() if dry_run else None
    outcome = handle_note_event(event, get_lifecycle_config(), client=client)
    info = {"outcome": outcome.value}
    if client is not None:
        info["dry_run_actions"] = client.calls
    return jsonify(info)
