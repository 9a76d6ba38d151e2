# comments in English; reST docstrings
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID

import redis  # type: ignore[import-untyped]

from clicker_server.services._shared.errors import StoreFailureError
from clicker_server.services._shared.ports import RefreshTokenRecord, RefreshTokenRecords, utc_now

log = logging.getLogger(__name__)

# Expired records are kept this long so lookups report "expired", not "not found"
EXPIRED_RETENTION = timedelta(days=7)


@contextmanager
def _redis_call(operation: str) -> Iterator[None]:
    try:
        yield
    except redis.RedisError as exc:
        log.error(
            "store.failure operation=%s backend=redis",
            operation,
            exc_info=True,
            extra={"error_kind": StoreFailureError.kind},
        )
        raise StoreFailureError() from exc


@dataclass(slots=True)
class RedisRefreshTokenRecords(RefreshTokenRecords):
    """
    Redis-backed refresh token records.

    Each token is a hash at ``rt:{token}`` with ``user_id``, ``expires_at``
    and (once revoked) ``revoked_at`` as Unix timestamps. Keys carry a TTL
    of the remaining lifetime plus :data:`EXPIRED_RETENTION`.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis
    clock: Callable[[], datetime] = field(default=utc_now)

    # -------------------- helpers --------------------

    @staticmethod
    def _k(token: str) -> str:
        return f"rt:{token}"

    @staticmethod
    def _to_ts(dt: datetime) -> int:
        # Naive datetimes are labelled as UTC (no conversion)
        return int((dt if dt.tzinfo else dt.replace(tzinfo=UTC)).timestamp())

    @staticmethod
    def _from_ts(raw: bytes | str) -> datetime:
        value = raw.decode() if isinstance(raw, bytes | bytearray) else raw
        return datetime.fromtimestamp(int(value), tz=UTC)

    def _record(self, token: str, h: dict[bytes, bytes]) -> RefreshTokenRecord:
        revoked_raw = h.get(b"revoked_at")
        return RefreshTokenRecord(
            token=token,
            user_id=UUID(h[b"user_id"].decode()),
            expires_at=self._from_ts(h[b"expires_at"]),
            revoked_at=self._from_ts(revoked_raw) if revoked_raw else None,
        )

    # -------------------- API ------------------------

    def store_refresh_token(
        self, *, token: str, user_id: UUID, expires_at: datetime
    ) -> RefreshTokenRecord:
        key = self._k(token)
        exp_ts = self._to_ts(expires_at)
        retention = int(EXPIRED_RETENTION.total_seconds())
        ttl = max(1, exp_ts - self._to_ts(self.clock()) + retention)

        with _redis_call("store_refresh_token"):
            pipe = self.r.pipeline(transaction=True)
            pipe.hset(key, mapping={"user_id": str(user_id), "expires_at": str(exp_ts)})
            pipe.expire(key, ttl)
            pipe.execute()

        return RefreshTokenRecord(
            token=token, user_id=user_id, expires_at=self._from_ts(str(exp_ts))
        )

    def get_refresh_token(self, token: str) -> RefreshTokenRecord | None:
        with _redis_call("get_refresh_token"):
            h = self.r.hgetall(self._k(token))
        if not h:
            return None
        return self._record(token, h)

    def revoke_token(self, token: str, *, revoked_at: datetime) -> RefreshTokenRecord | None:
        """
        Set ``revoked_at`` once, atomically.

        Uses WATCH/MULTI/EXEC so a key that expires between the read and the
        write is never recreated as a partial hash.
        """
        key = self._k(token)
        with _redis_call("revoke_token"):
            while True:
                try:
                    with self.r.pipeline() as p:
                        p.watch(key)
                        h = p.hgetall(key)
                        if not h:
                            p.unwatch()
                            return None
                        if h.get(b"revoked_at"):
                            p.unwatch()
                            return self._record(token, h)

                        p.multi()
                        p.hset(key, "revoked_at", str(self._to_ts(revoked_at)))
                        p.execute()

                    h[b"revoked_at"] = str(self._to_ts(revoked_at)).encode()
                    return self._record(token, h)
                except redis.WatchError:
                    # Concurrent modification detected; retry
                    continue
