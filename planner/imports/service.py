"""Drill import service layer.

Runs the import pipeline for one owner: normalize every row, resolve its
category, skip duplicates, then write the accepted drills according to the
batch policy. Rows are handled in file order because duplicate detection and
the category cache depend on earlier rows.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from planner.db.errors import PersistenceError, classify_db_error
from planner.db.models import Drill
from planner.drills.service import DrillService
from planner.imports.categories import CategoryResolver
from planner.imports.duplicates import DuplicateFilter
from planner.imports.exceptions import CategoryResolutionError, ImportAbortedError
from planner.imports.normalizer import CandidateDrill, normalize_rows
from planner.imports.schemas import (
    BatchPolicy,
    CandidateRow,
    ImportPreview,
    ImportResult,
    RowError,
)

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 100


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def build_summary(imported: int, skipped: int, failed: int) -> str:
    """Build the human-readable summary for an import result.

    Args:
        imported: Rows imported.
        skipped: Rows skipped as duplicates.
        failed: Rows with errors.

    Returns:
        str: Summary message.
    """
    if imported == 0 and failed == 0 and skipped > 0:
        return "All drills already exist in your library"

    parts = [f"Imported {_plural(imported, 'drill')}"]
    if skipped:
        parts.append(f"skipped {_plural(skipped, 'duplicate')}")
    if failed:
        parts.append(f"{_plural(failed, 'row')} failed")
    return ", ".join(parts)


class DrillImportService:
    """Service class for importing drills from spreadsheet rows."""

    def __init__(
        self,
        db: Session,
        user_id: str,
        policy: BatchPolicy = BatchPolicy.PER_ROW,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        """Initialize import service.

        Args:
            db: Database session.
            user_id: Owner of the imported drills.
            policy: How accepted drills are written.
            chunk_size: Rows per insert under the per-row policy.
        """
        self.db = db
        self.user_id = user_id
        self.policy = policy
        self.chunk_size = max(1, chunk_size)

    def _load_existing_names(self) -> set[str]:
        try:
            return DrillService(self.db, self.user_id).existing_names()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Could not load drill library for user %s", self.user_id)
            raise ImportAbortedError("Could not load your drill library") from e

    def run(self, rows: Sequence[Mapping[str, Any]]) -> ImportResult:
        """Import rows into the owner's library.

        Args:
            rows: Raw rows in file order.

        Returns:
            ImportResult: Counts and row errors.

        Raises:
            ImportAbortedError: If the library could not be read at all.
        """
        candidates = normalize_rows(list(rows))
        duplicates = DuplicateFilter(self._load_existing_names())
        resolver = CategoryResolver(self.db, self.user_id)

        errors: list[RowError] = []
        accepted: list[tuple[CandidateDrill, str]] = []
        skipped = 0

        for candidate in candidates:
            if isinstance(candidate, RowError):
                errors.append(candidate)
                continue

            try:
                category_id = resolver.resolve(candidate.category_name)
            except CategoryResolutionError as e:
                errors.append(RowError(row=candidate.row, error=str(e)))
                continue

            if not duplicates.accept(candidate.name):
                skipped += 1
                continue

            accepted.append((candidate, category_id))

        imported, insert_errors = self._persist(accepted)
        errors.extend(insert_errors)
        errors.sort(key=lambda e: e.row)

        result = ImportResult(
            success=not errors,
            total_rows=len(candidates),
            imported=imported,
            skipped=skipped,
            errors=errors,
            message=build_summary(imported, skipped, len(errors)),
            categories_created=list(resolver.created),
        )
        logger.info(
            "Drill import for user %s: %d rows, %d imported, %d skipped, %d errors (%s)",
            self.user_id,
            result.total_rows,
            result.imported,
            result.skipped,
            len(result.errors),
            self.policy.value,
        )
        return result

    def _build_drill(self, candidate: CandidateDrill, category_id: str) -> Drill:
        return Drill(
            user_id=self.user_id,
            category_id=category_id,
            name=candidate.name,
            minutes=candidate.minutes,
            notes=candidate.notes,
            media_links=candidate.media_links,
        )

    def _insert(self, batch: list[tuple[CandidateDrill, str]]) -> None:
        """Insert drills in one transaction.

        Raises:
            PersistenceError: If the commit failed; the session is rolled back.
        """
        self.db.add_all([self._build_drill(c, category_id) for c, category_id in batch])
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise classify_db_error(e) from e

    def _persist(self, accepted: list[tuple[CandidateDrill, str]]) -> tuple[int, list[RowError]]:
        if not accepted:
            return 0, []
        if self.policy == BatchPolicy.ATOMIC:
            return self._persist_atomic(accepted)
        return self._persist_per_row(accepted)

    def _persist_atomic(
        self, accepted: list[tuple[CandidateDrill, str]]
    ) -> tuple[int, list[RowError]]:
        try:
            self._insert(accepted)
        except PersistenceError as e:
            logger.warning(
                "Batch insert of %d drills failed for user %s: %s",
                len(accepted),
                self.user_id,
                e,
            )
            return 0, [
                RowError(row=c.row, error=f"Failed to save drill: {e}") for c, _ in accepted
            ]
        return len(accepted), []

    def _persist_per_row(
        self, accepted: list[tuple[CandidateDrill, str]]
    ) -> tuple[int, list[RowError]]:
        imported = 0
        errors: list[RowError] = []

        for start in range(0, len(accepted), self.chunk_size):
            chunk = accepted[start : start + self.chunk_size]
            try:
                self._insert(chunk)
                imported += len(chunk)
                continue
            except PersistenceError as e:
                logger.warning(
                    "Insert of %d drills failed for user %s, retrying row by row: %s",
                    len(chunk),
                    self.user_id,
                    e,
                )

            for item in chunk:
                try:
                    self._insert([item])
                    imported += 1
                except PersistenceError as e:
                    candidate = item[0]
                    reason = (
                        "A drill with this name already exists"
                        if e.is_unique_violation
                        else f"Failed to save drill: {e}"
                    )
                    errors.append(RowError(row=candidate.row, error=reason))

        return imported, errors

    def preview(self, rows: Sequence[Mapping[str, Any]]) -> ImportPreview:
        """Validate rows and report what an import would do, without writing.

        Args:
            rows: Raw rows in file order.

        Returns:
            ImportPreview: Rows that would be imported, errors and duplicates.

        Raises:
            ImportAbortedError: If the library could not be read at all.
        """
        candidates = normalize_rows(list(rows))
        duplicates = DuplicateFilter(self._load_existing_names())

        preview = ImportPreview(total_rows=len(candidates))
        for candidate in candidates:
            if isinstance(candidate, RowError):
                preview.errors.append(candidate)
                continue

            if duplicates.in_library(candidate.name):
                reason = f'Duplicate drill name: "{candidate.name}" already exists in your library'
            elif duplicates.is_duplicate(candidate.name):
                reason = f'Duplicate drill name: "{candidate.name}" appears earlier in the file'
            else:
                duplicates.register(candidate.name)
                preview.rows.append(
                    CandidateRow(
                        row=candidate.row,
                        category=candidate.category_name,
                        name=candidate.name,
                        minutes=candidate.minutes,
                        notes=candidate.notes,
                        media_links=candidate.media_links,
                    )
                )
                continue
            preview.duplicates.append(RowError(row=candidate.row, error=reason))

        preview.valid_rows = len(preview.rows)
        preview.invalid_rows = len(preview.errors)
        preview.duplicate_rows = len(preview.duplicates)
        return preview


def get_import_service(
    db: Session,
    user_id: str,
    policy: BatchPolicy = BatchPolicy.PER_ROW,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> DrillImportService:
    """Factory function for DrillImportService.

    Args:
        db: Database session.
        user_id: Owner ID.
        policy: Batch policy.
        chunk_size: Rows per insert chunk.

    Returns:
        DrillImportService: Import service instance.
    """
    return DrillImportService(db, user_id, policy=policy, chunk_size=chunk_size)
