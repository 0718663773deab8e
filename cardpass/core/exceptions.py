"""
Exceptions raised by the pass core.

Design validation problems are never raised; they are returned as lists in a
ValidationResult so the editor can show all of them at once.
"""


class CardPassError(Exception):
    """Base class for errors raised by cardpass."""


class FormatError(CardPassError, ValueError):
    """A hex color or customer id is malformed."""


class EncodingError(CardPassError):
    """A pass could not be built for a platform.

    Raised instead of returning a partial pass.
    """

    def __init__(
        self,
        message: str,
        platform: str | None = None,
        errors: list[str] | None = None,
    ):
        super().__init__(message)
        self.platform = platform
        self.errors = errors or []
