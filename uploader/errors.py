"""Exception hierarchy for the uploader."""


class UploaderError(Exception):
    """Base class for every error raised by the uploader."""


class ConfigError(UploaderError):
    """Raised when required environment configuration is missing or invalid."""


class BuildError(UploaderError):
    """Raised when a client is built without both credentials."""


class TransportError(UploaderError):
    """Raised when the provider cannot be reached or its response cannot be parsed."""


class ProviderError(UploaderError):
    """Raised when the provider reports failure or omits the expected result."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = list(errors or [])
        if self.errors:
            message = f"{message}: {self.errors}"
        super().__init__(message)


class PollTimeoutError(UploaderError):
    """Raised when a video is still not ready after the configured number of polls."""

    def __init__(self, uid: str, polls: int) -> None:
        self.uid = uid
        self.polls = polls
        super().__init__(f"Video {uid} not ready after {polls} polls")


class UploadError(UploaderError):
    """Raised by the entry point when a single URL fails to upload."""

    def __init__(self, message: str, url: str) -> None:
        self.url = url
        super().__init__(f"{message} ({url})")
