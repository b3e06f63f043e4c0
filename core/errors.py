from typing import Optional


class OptimizerError(Exception):
    """Base class for errors raised while handling an optimisation request."""


class ValidationError(OptimizerError):
    status_code = 400
    public_message = "No video file uploaded"

    def __init__(self, message: str = public_message):
        super().__init__(message)


class ProcessingError(OptimizerError):
    """An external transcoder failed or produced no output.

    ``returncode`` and ``stderr`` are kept for the logs only; clients always
    receive ``public_message``.
    """

    status_code = 500
    public_message = "Error processing video"

    def __init__(self, message: str, method: Optional[str] = None,
                 returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.method = method
        self.returncode = returncode
        self.stderr = stderr


class CleanupError(OptimizerError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to delete {path}: {reason}")
        self.path = path
        self.reason = reason
