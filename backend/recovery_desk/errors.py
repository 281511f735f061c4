class RecoveryDeskError(Exception):
    """Base class for business-rule failures raised by the services."""


class ValidationFailed(RecoveryDeskError):
    def __init__(self, errors: dict[str, str] | list[str]):
        self.errors = errors
        if isinstance(errors, dict):
            message = "; ".join(f"{field}: {msg}" for field, msg in errors.items())
        else:
            message = "; ".join(errors)
        super().__init__(message or "Validation failed")


class ProtectedJobIdError(RecoveryDeskError):
    def __init__(self, job_id: str, action: str = "edit"):
        self.job_id = job_id
        self.action = action
        super().__init__(f"Cannot {action} auto-generated Job ID: {job_id}")


class DuplicateJobId(RecoveryDeskError):
    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job ID {job_id} already exists")
