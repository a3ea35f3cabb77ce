from typing import Optional

class SheetfmtError(Exception):
    """base class for exceptions in sheetfmt."""
    pass

class MalformedFormulaError(SheetfmtError):
    """raised in strict mode when a formula is lexically malformed."""
    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)

class ConfigError(SheetfmtError):
    """raised when the config file holds an invalid value or cannot be written."""
    pass

class ReferenceFormatError(SheetfmtError):
    """raised when a cell reference cannot be converted."""
    pass

class InvalidPatternError(SheetfmtError):
    """raised when a replacement pattern is not a valid regular expression."""
    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"invalid pattern '{pattern}': {reason}")
