"""
The GitHub operations the lifecycle bot needs.
"""

import logging

from lifecycle_webhooks.auth import get_github_session
from lifecycle_webhooks.types import CommentDict, IssueDict
from lifecycle_webhooks.utils import check_response, retry_get, text_summary

logger = logging.getLogger(__name__)


class GitHubClient:
    """
    Implementation of the lifecycle operations against the GitHub REST API.

    Every method raises RequestFailed if GitHub doesn't do what we asked.
    """

    def __init__(self, session=None):
        self.session = session or get_github_session()

    def _comment(self, org: str, repo: str, number: int, text: str) -> None:
        # Pull request conversation comments are issue comments to GitHub.
        url = f"/repos/{org}/{repo}/issues/{number}/comments"
        logger.info(f"Commenting on {org}/{repo}#{number}: {text_summary(text, 90)!r}")
        resp = self.session.post(url, json={"body": text})
        check_response(resp)

    def create_pull_request_comment(self, org: str, repo: str, number: int, text: str) -> None:
        self._comment(org, repo, number, text)

    def create_issue_comment(self, org: str, repo: str, number: int, text: str) -> None:
        self._comment(org, repo, number, text)

    def is_collaborator(self, org: str, repo: str, login: str) -> bool:
        """
        Is `login` a collaborator on the repo?

        GitHub answers 204 for collaborators and 404 for everyone else. Any
        other answer is an error, not a "no".
        """
        resp = self.session.get(f"/repos/{org}/{repo}/collaborators/{login}")
        if resp.status_code == 404:
            return False
        check_response(resp)
        return True

    def close_issue(self, org: str, repo: str, number: int) -> None:
        self._set_state(f"/repos/{org}/{repo}/issues/{number}", "closed")

    def close_pull_request(self, org: str, repo: str, number: int) -> None:
        self._set_state(f"/repos/{org}/{repo}/pulls/{number}", "closed")

    def reopen_issue(self, org: str, repo: str, number: int) -> None:
        self._set_state(f"/repos/{org}/{repo}/issues/{number}", "open")

    def _set_state(self, url: str, state: str) -> None:
        logger.info(f"Setting state of {url} to {state!r}")
        resp = self.session.patch(url, json={"state": state})
        check_response(resp)

    # Reads, for re-processing a comment by hand.

    def get_comment(self, org: str, repo: str, comment_id: int) -> CommentDict:
        resp = retry_get(self.session, f"/repos/{org}/{repo}/issues/comments/{comment_id}")
        check_response(resp)
        return resp.json()

    def get_commented_issue(self, comment: CommentDict) -> IssueDict:
        """Get the issue or pull request `comment` was made on."""
        resp = retry_get(self.session, comment["issue_url"])
        check_response(resp)
        return resp.json()


class DryRunClient:
    """
    Implementation of the lifecycle operations for dry runs.

    Nothing is changed on GitHub: the calls are recorded in `calls`.
    Collaborator checks are answered from `collaborators`, or by asking
    GitHub if `collaborators` is None.
    """

    def __init__(self, collaborators=None):
        self.collaborators = collaborators
        self.calls = []

    def is_collaborator(self, org: str, repo: str, login: str) -> bool:
        self.calls.append(("is_collaborator", {"org": org, "repo": repo, "login": login}))
        if self.collaborators is None:
            return GitHubClient().is_collaborator(org, repo, login)
        return login in self.collaborators

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        def fn(org, repo, number, *args):
            kwargs = {"org": org, "repo": repo, "number": number}
            if args:
                kwargs["text"] = args[0]
            self.calls.append((name, kwargs))
        return fn
