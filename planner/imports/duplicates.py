"""Duplicate drill detection for a single import run."""

from collections.abc import Iterable

from planner.db.models import name_key


class DuplicateFilter:
    """Tracks which drill names are taken for one owner during one import.

    A name is a duplicate if it is already in the owner's library or was
    accepted from an earlier row of the same file. Rows are checked in file
    order, so the first occurrence wins.
    """

    def __init__(self, existing_names: Iterable[str]):
        """Initialize the filter.

        Args:
            existing_names: Names of drills already in the library.
        """
        self._existing = {name_key(n) for n in existing_names}
        self._seen: set[str] = set()

    def is_duplicate(self, name: str) -> bool:
        """Check whether a name is already taken.

        Args:
            name: Candidate drill name.

        Returns:
            bool: True if the library or an earlier row has the name.
        """
        key = name_key(name)
        return key in self._existing or key in self._seen

    def in_library(self, name: str) -> bool:
        """Check whether the name exists in the library (ignoring this run)."""
        return name_key(name) in self._existing

    def register(self, name: str) -> None:
        """Mark a name as accepted in this run.

        Args:
            name: Accepted drill name.
        """
        self._seen.add(name_key(name))

    def accept(self, name: str) -> bool:
        """Register the name unless it is a duplicate.

        Args:
            name: Candidate drill name.

        Returns:
            bool: True if accepted, False if it is a duplicate.
        """
        if self.is_duplicate(name):
            return False
        self.register(name)
        return True
