"""Error types shared by the store, query and form layers."""

FOREIGN_KEY_VIOLATION = '23503'
UNIQUE_VIOLATION = '23505'
NOT_NULL_VIOLATION = '23502'
NO_ROWS = 'PGRST116'

DELETE_MESSAGES = {
    'customer': (
        'Cannot delete customer: This customer is being used in quotes or '
        'projects. Please remove all references first.'
    ),
    'supplier': (
        'Cannot delete supplier: This supplier is being used in materials or '
        'hardware. Please remove all references first.'
    ),
}


class JoineryError(Exception):
    """Base class for application errors."""


class StoreUnavailableError(JoineryError):
    def __init__(self, message='The data store is not configured.'):
        super().__init__(message)
        self.message = message


class StoreError(JoineryError):
    """A failure reported by the store, tagged with a SQLSTATE-style code."""

    def __init__(self, message, code=None, details=None, hint=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint

    def to_dict(self):
        return {
            'message': self.message,
            'code': self.code,
            'details': self.details,
            'hint': self.hint,
        }


class ValidationError(JoineryError):
    def __init__(self, errors):
        super().__init__('; '.join(f'{k}: {v}' for k, v in errors.items()))
        self.errors = dict(errors)


class FlagLimitError(JoineryError):
    def __init__(self, limit=3):
        self.limit = limit
        self.message = (
            f'Maximum of {limit} tasks can be flagged at once. '
            'Please unflag a task first.'
        )
        super().__init__(self.message)


def friendly_delete_error(entity, error):
    """Translate a foreign-key failure on delete into a readable message."""
    if error.code != FOREIGN_KEY_VIOLATION:
        return error
    message = DELETE_MESSAGES.get(
        entity,
        f'Cannot delete {entity}: it is still referenced by other records.',
    )
    return StoreError(message, code=error.code, details=error.details, hint=error.hint)


def error_message(exc, fallback):
    message = getattr(exc, 'message', None)
    return message or fallback
