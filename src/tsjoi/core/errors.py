class TsJoiError(Exception):
    """Base class for tsjoi errors."""


class UnsupportedConstructError(TsJoiError):
    """A type expression, union shape or reference form has no schema rendering."""

    def __init__(self, message: str, text: str) -> None:
        super().__init__(message)
        self.text = text
