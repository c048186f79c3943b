"""Exceptions raised by the drill import pipeline."""


class ImportAbortedError(Exception):
    """The import could not run at all; no partial result exists."""


class CategoryResolutionError(Exception):
    """A category could not be looked up or created.

    Attributes:
        category_name: Name as it appeared in the row.
    """

    def __init__(self, category_name: str, message: str):
        self.category_name = category_name
        super().__init__(message)


class UnsupportedFileError(ValueError):
    """The uploaded file type is not accepted."""


class SpreadsheetParseError(ValueError):
    """The uploaded file could not be decoded into rows."""
