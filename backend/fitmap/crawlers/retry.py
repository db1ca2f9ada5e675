"""
Bounded retry policy shared by all crawlers.

One policy value is applied at each retry point (first area page,
pagination page, gym detail page) instead of hand-written nested
try/except blocks.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class RetryPolicy:
    """
    Fixed-backoff retry policy.

    Args:
        max_attempts: Total attempts including the first one
        backoff_seconds: Wait between attempts
    """
    max_attempts: int = 2
    backoff_seconds: float = 0.0

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        on_retry: Optional[Callable[[Exception], Awaitable[None]]] = None,
        description: str = 'operation',
    ) -> T:
        """
        Run an async operation until it succeeds or attempts run out.

        Args:
            operation: Zero-argument coroutine factory, called once per attempt
            on_retry: Awaited with the failure before the next attempt
            description: Label for log messages

        Returns:
            The operation's result

        Raises:
            The last exception once all attempts have failed
        """
        last_error: Optional[Exception] = None

        for attempt in range(self.max_attempts):
            try:
                return await operation()
            except Exception as e:
                last_error = e
                logger.warning(f"Attempt {attempt + 1}/{self.max_attempts} failed for {description}: {e}")
                if attempt < self.max_attempts - 1:
                    if on_retry is not None:
                        await on_retry(e)
                    if self.backoff_seconds > 0:
                        await asyncio.sleep(self.backoff_seconds)

        raise last_error
