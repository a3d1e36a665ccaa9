"""
The bot makes comments on issues and pull requests. These are the texts.
"""

from enum import Enum, auto

from lifecycle_webhooks.types import NoteTarget


class BotComment(Enum):
    """
    Comments the bot can leave on issues and pull requests.
    """
    NO_PERMISSION = auto()
    CLOSED = auto()
    REOPENED = auto()


BOT_COMMENT_INDICATORS = {
    BotComment.NO_PERMISSION: [
        "<!-- comment:lifecycle_no_permission -->",
        "unless you are the author of it or a collaborator",
    ],
    BotComment.CLOSED: [
        "<!-- comment:lifecycle_closed -->",
    ],
    BotComment.REOPENED: [
        "<!-- comment:lifecycle_reopened -->",
    ],
}


def is_comment_kind(kind: BotComment, text: str) -> bool:
    """
    Is this `text` a comment of this `kind`?
    """
    return any(snip in text for snip in BOT_COMMENT_INDICATORS[kind])


def _article(target: NoteTarget) -> str:
    return "an" if target.kind[0] in "aeiou" else "a"


def no_permission_comment(commenter: str, action: str, target: NoteTarget) -> str:
    """
    Tell `commenter` that they can't `action` the target.

    `action` is "close" or "reopen".
    """
    return (
        f"{BOT_COMMENT_INDICATORS[BotComment.NO_PERMISSION][0]}\n"
        f"***@{commenter}*** you can't {action} {_article(target)} {target.kind} "
        "unless you are the author of it or a collaborator."
    )


def closed_comment(commenter: str, target: NoteTarget) -> str:
    """Say who closed the target."""
    return (
        f"{BOT_COMMENT_INDICATORS[BotComment.CLOSED][0]}\n"
        f"This {target.kind} is closed by: ***@{commenter}***."
    )


def reopened_comment(commenter: str, target: NoteTarget) -> str:
    """Say who reopened the target."""
    return (
        f"{BOT_COMMENT_INDICATORS[BotComment.REOPENED][0]}\n"
        f"This {target.kind} is reopened by: ***@{commenter}***."
    )
