"""
Love Nest - Journal Errors

Every failure the journal layer reports to its caller. Each error carries
the HTTP status the JSON views answer with.
"""


class JournalError(Exception):
    """Base class for journal failures."""

    status = 400
    code = 'journal_error'

    def __init__(self, message='', **details):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__
        self.details = details

    def as_dict(self):
        payload = {'error': self.code, 'message': self.message}
        if self.details:
            payload['details'] = self.details
        return payload


class NotAuthenticated(JournalError):
    """No valid session."""

    status = 401
    code = 'not_authenticated'


class ProfileMissing(JournalError):
    """The session has no profile row."""

    status = 401
    code = 'profile_missing'


class ValidationError(JournalError):
    """A required field is blank or a field is not writable."""

    status = 400
    code = 'validation_error'


class OwnershipViolation(JournalError):
    """Write attempted against a row or field the caller does not control."""

    status = 403
    code = 'ownership_violation'


class NotFound(JournalError):
    """Target row is absent or not accessible."""

    status = 404
    code = 'not_found'


class TransientFetchFailure(JournalError):
    """The backend failed while reading."""

    status = 503
    code = 'transient_fetch_failure'
