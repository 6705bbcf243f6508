"""Port for the persistence layer's transaction boundary."""

from typing import Any, Callable, Protocol, TypeVar

T = TypeVar('T')


class UnitOfWork(Protocol):
    def run(self, work: Callable[[Any], T]) -> T:
        """Run work(session) in one transaction.

        Commits when work returns; rolls back and re-raises when it raises.
        The session is passed through to repository write methods.
        """
        ...
