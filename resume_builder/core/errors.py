"""Errors raised by resume storage and gateways."""


class ResumeError(Exception):
    """Base error for resume operations."""


class ResumeNotFoundError(ResumeError):
    """Requested resume id does not exist."""
    
    def __init__(self, resume_id: str):
        self.resume_id = resume_id
        super().__init__(f"Resume not found: {resume_id}")


class InvalidResumeIdError(ResumeError, ValueError):
    """Resume id cannot be used as a storage key."""
    
    def __init__(self, resume_id: str):
        self.resume_id = resume_id
        super().__init__(
            f"Invalid resume id: {resume_id!r}. "
            "Only letters, digits, '-' and '_' are allowed"
        )


class ResumeStorageError(ResumeError):
    """Reading or writing a stored resume failed."""
