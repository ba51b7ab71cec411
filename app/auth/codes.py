"""One-time login codes kept in redis.

Only an HMAC of the code is stored, under one key per email, with an explicit
TTL. Codes survive process restarts and are shared by every instance; a new
request for the same email replaces the previous code.
"""

import hmac

import redis

from app.auth.tokens import hash_verification_code
from app.config import settings
from app.redis_client import redis_client

KEY_PREFIX = "auth:code:"

class VerificationCodeStore:
    def __init__(self, client: redis.Redis, ttl_seconds: int | None = None):
        self.client = client
        self.ttl_seconds = ttl_seconds or settings.verification_code_ttl_seconds

    def _key(self, email: str) -> str:
        return f"{KEY_PREFIX}{email}"

    def put(self, email: str, code: str) -> None:
        self.client.set(self._key(email), hash_verification_code(email, code), ex=self.ttl_seconds)

    def consume(self, email: str, code: str) -> bool:
        # GETDEL: a code is usable once, right or wrong
        stored = self.client.getdel(self._key(email))
        if stored is None:
            return False
        if isinstance(stored, bytes):
            stored = stored.decode("utf-8")
        return hmac.compare_digest(stored, hash_verification_code(email, code))

def get_code_store() -> VerificationCodeStore:
    return VerificationCodeStore(redis_client)
