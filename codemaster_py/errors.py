"""Exception taxonomy for codemaster_py."""


class CodeMasterError(Exception):
    """Base class for all codemaster_py errors."""


class StoreError(CodeMasterError):
    """Remote progress store unreachable or returned malformed data."""


class AuthFailure(CodeMasterError):
    """Login or session restore could not reach a usable progress record."""


class SyncFailure(CodeMasterError):
    """A background persistence write failed."""


class JudgeFailure(CodeMasterError):
    """Judging oracle unreachable or returned unusable data."""


class SubmissionInProgress(CodeMasterError):
    """A submission for this session is still being evaluated."""


class NotAuthenticated(CodeMasterError):
    """The operation needs an authenticated session."""


class ProblemNotFound(CodeMasterError):
    """No problem with the requested id exists in the catalog."""
