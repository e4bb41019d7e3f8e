"""Review package: comment visibility across versions and comment mutations."""

from backend.review.carryover import get_comments
from backend.review.mutations import create_comment, create_reply, move_comment, toggle_resolve

__all__ = ["get_comments", "create_comment", "create_reply", "toggle_resolve", "move_comment"]
