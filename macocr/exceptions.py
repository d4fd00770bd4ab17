# macocr/exceptions.py


class UploadError(Exception):
    """Base exception for storing an uploaded file."""


class UploadCreateError(UploadError):
    """Raised when the destination file cannot be created."""


class UploadWriteError(UploadError):
    """Raised when the payload cannot be written to the created file."""
