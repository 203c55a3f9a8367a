"""
Error kinds surfaced by the thinking workspace services.
"""


class ThinkingError(Exception):
    """Base exception for thinking workspace errors."""
    kind = 'thinking_error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_result(self) -> dict:
        """Render the error as a structured result record."""
        return {'success': False, 'error': self.kind, 'message': self.message}


class ValidationError(ThinkingError):
    """Invalid arguments or relationship; raised before any mutation."""
    kind = 'validation_error'


class NotFoundError(ThinkingError):
    """Unknown session, or no default session when one is required."""
    kind = 'not_found'


class StorageError(ThinkingError):
    """Underlying read/write/enumerate/delete failure."""
    kind = 'storage_error'
