"""
Like/dislike vote transitions.

A user's vote on one invention is one of three states:
None (no vote), True (liked), False (disliked).
Repeating the current vote retracts it; the opposite vote flips it.
"""

from __future__ import annotations

from enum import Enum

Vote = bool | None


class VoteWrite(Enum):
    """The single row write a transition needs."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


def next_vote(current: Vote, is_like: bool) -> Vote:
    """
    Resulting vote after a user submits is_like.

    >>> next_vote(None, True)
    True
    >>> next_vote(True, True) is None
    True
    >>> next_vote(True, False)
    False
    """
    if current is None:
        return is_like
    if current == is_like:
        return None
    return is_like


def write_for(current: Vote, is_like: bool) -> VoteWrite:
    """Row operation that moves current to next_vote(current, is_like)."""
    if current is None:
        return VoteWrite.INSERT
    if next_vote(current, is_like) is None:
        return VoteWrite.DELETE
    return VoteWrite.UPDATE
