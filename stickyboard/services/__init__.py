"""Typed façades over the API client, one per backend resource."""

from stickyboard.services.auth import AuthService
from stickyboard.services.boards import BoardService
from stickyboard.services.cards import CardService
from stickyboard.services.sections import SectionService
from stickyboard.services.tabs import TabService
from stickyboard.services.users import UserService

__all__ = [
    "AuthService",
    "BoardService",
    "CardService",
    "SectionService",
    "TabService",
    "UserService",
]
