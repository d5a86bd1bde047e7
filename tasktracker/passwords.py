"""
tasktracker/passwords.py

Salted one-way password hashing, run off the request's event loop.

Werkzeug produces "method$salt$hash" strings with a fresh random salt per
call and compares them in constant time. Both operations are CPU-bound, so
they are dispatched to a small dedicated thread pool and awaited.

Wire it like any other extension:

    hasher = PasswordHasher()
    hasher.init_app(app)

    stored = await hasher.hash("Passw0rd1")
    ok = await hasher.verify(stored, "Passw0rd1")
"""

from __future__ import annotations

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

logger = logging.getLogger(__name__)

DEFAULT_METHOD = "scrypt"
DEFAULT_SALT_LENGTH = 16
DEFAULT_WORKERS = 4


class PasswordHasher:
    def __init__(self, app=None) -> None:
        self.method = DEFAULT_METHOD
        self.salt_length = DEFAULT_SALT_LENGTH
        self.workers = DEFAULT_WORKERS
        self._executor: Optional[ThreadPoolExecutor] = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        self.method = app.config.get("PASSWORD_HASH_METHOD", DEFAULT_METHOD)
        self.salt_length = int(app.config.get("PASSWORD_SALT_LENGTH", DEFAULT_SALT_LENGTH))
        self.workers = int(app.config.get("PASSWORD_HASH_WORKERS", DEFAULT_WORKERS))
        self.shutdown()
        app.extensions["password_hasher"] = self

    @property
    def executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.workers,
                thread_name_prefix="password-hash",
            )
        return self._executor

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

    # ------------------------------------------------------------------
    # Sync primitives (run inside the pool)
    # ------------------------------------------------------------------
    def hash_sync(self, raw_password: str) -> str:
        return generate_password_hash(
            raw_password,
            method=self.method,
            salt_length=self.salt_length,
        )

    @staticmethod
    def verify_sync(stored_hash: str, raw_password: str) -> bool:
        if not stored_hash:
            return False
        try:
            return check_password_hash(stored_hash, raw_password)
        except ValueError:
            # unknown/garbled method prefix in the stored value
            logger.warning("Stored password hash has an unsupported format")
            return False

    # ------------------------------------------------------------------
    # Awaitable API
    # ------------------------------------------------------------------
    async def hash(self, raw_password: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self.executor, functools.partial(self.hash_sync, raw_password)
        )

    async def verify(self, stored_hash: str, raw_password: str) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self.executor, functools.partial(self.verify_sync, stored_hash, raw_password)
        )
