"""Collection-specific repositories built on the document store."""

from docstore.repositories.bugs import BugRepository
from docstore.repositories.tokens import RevokedTokenRepository
from docstore.repositories.users import UserRepository, public_user

__all__ = ["BugRepository", "RevokedTokenRepository", "UserRepository", "public_user"]
