"""Revoked bearer credentials, keyed by the token's ``jti`` claim."""

from __future__ import annotations

from api.utils.debug import print__token_debug
from docstore.errors import DuplicateKeyError
from docstore.store.base import DocumentStore

REVOKED_TOKENS_COLLECTION = "revoked_tokens"


class RevokedTokenRepository:
    collection = REVOKED_TOKENS_COLLECTION

    def __init__(self, store: DocumentStore):
        self.store = store

    async def revoke(self, jti: str, user_id: str, expires_at: int) -> None:
        """Record ``jti`` as revoked. Revoking twice is a no-op."""
        try:
            await self.store.insert_one(
                self.collection,
                {"id": jti, "userId": user_id, "expiresAt": expires_at},
            )
        except DuplicateKeyError:
            print__token_debug(f"TOKEN REVOKE: {jti} already revoked")
            return
        print__token_debug(f"TOKEN REVOKE: {jti} revoked for user {user_id}")

    async def is_revoked(self, jti: str) -> bool:
        if not jti:
            return False
        return await self.store.find_one(self.collection, jti) is not None
