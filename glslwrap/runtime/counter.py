"""Reference counter sharing one native resource between wrapper instances."""

from collections.abc import Callable

from loguru import logger


class Counter:
    """Counts users of a shared resource and releases it at zero.

    Every generated wrapper class owns one counter. ``compile()`` acquires it,
    ``dispose()`` releases it, and the last release runs ``on_zero``, which
    deletes the shared program.

    Args:
        on_zero: Called when the count drops back to zero
    """

    def __init__(self, on_zero: Callable[[], None]):
        self.on_zero = on_zero
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    def acquire(self) -> int:
        """Increment the count and return it."""
        self._count += 1
        return self._count

    def release(self) -> int:
        """Decrement the count, running ``on_zero`` when it reaches zero.

        Releasing a counter that is already at zero does nothing.

        Returns:
            The count after the release
        """
        if self._count == 0:
            logger.warning("Counter released more often than it was acquired")
            return 0
        self._count -= 1
        if self._count == 0:
            self.on_zero()
        return self._count

    def __repr__(self) -> str:
        return f"Counter(count={self._count})"
