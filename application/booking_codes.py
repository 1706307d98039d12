"""Booking code generation"""
import logging
import random
import string
import time
from typing import Callable, Optional

from domain.repositories import BookingRepository

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
MIN_RANDOM_CHARS = 4
FALLBACK_DIGITS = 6


class BookingCodeGenerator:
    """Generates short guest-facing booking codes such as ``BOOK7Q2M``.

    Uniqueness is checked against the repository before the code is handed
    out. The check is advisory only: the unique index on booking codes is what
    finally rejects a duplicate, and the caller retries with a new code.
    """

    def __init__(
        self,
        repository: BookingRepository,
        prefix: str = "BOOK",
        length: int = 8,
        max_attempts: int = 10,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time
    ):
        self.repository = repository
        self.prefix = prefix
        self.length = length if length > len(prefix) else len(prefix) + MIN_RANDOM_CHARS
        self.max_attempts = max_attempts
        self._rng = rng or random.SystemRandom()
        self._clock = clock

    def random_code(self) -> str:
        suffix = "".join(self._rng.choices(CODE_ALPHABET, k=self.length - len(self.prefix)))
        return self.prefix + suffix

    def fallback_code(self) -> str:
        """Prefix plus the last six digits of the current time in milliseconds"""
        millis = str(int(self._clock() * 1000))
        return self.prefix + millis[-FALLBACK_DIGITS:]

    async def generate(self) -> str:
        for _ in range(self.max_attempts):
            code = self.random_code()
            if not await self.repository.code_exists(code):
                return code

        code = self.fallback_code()
        logger.warning(
            "No free booking code after %d attempts, falling back to %s",
            self.max_attempts, code
        )
        return code
