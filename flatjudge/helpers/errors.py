"""
Typed failures raised by the contest helpers.

Routes turn these into JSON responses via the handler registered in
`flatjudge.routes.register_blueprints`; nothing here knows about HTTP
beyond the suggested status code.
"""


class ContestError(Exception):
    status_code = 400
    code = "contest_error"

    def __init__(self, message=None, **details):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        self.details = details

    def to_dict(self):
        out = {"success": False, "error": self.message, "code": self.code}
        if self.details:
            out["details"] = self.details
        return out


class ValidationError(ContestError):
    """Missing / malformed input. Raised before any mutation."""
    status_code = 400
    code = "validation_error"


class ScoreOutOfRange(ValidationError):
    code = "score_out_of_range"


class NotFound(ContestError):
    status_code = 404
    code = "not_found"


class DuplicateSubmission(ContestError):
    """Judge already scored this rider / device already voted (window closed)."""
    status_code = 409
    code = "duplicate_submission"


class VotingClosed(ContestError):
    status_code = 403
    code = "voting_closed"


class WrongRider(ContestError):
    status_code = 403
    code = "wrong_rider"


class StorageFailure(ContestError):
    """Persistence layer unavailable. Safe for the caller to retry."""
    status_code = 503
    code = "storage_failure"
    retryable = True
