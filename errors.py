"""Exception taxonomy shared by the scaffold helpers, router and views."""


class ScaffoldError(Exception):
    """Base error carrying the HTTP status code the error handler should use."""

    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class UnsupportedExtension(ScaffoldError):
    """Raised when a file extension maps to no asset category."""


class MissingDirectory(ScaffoldError):
    """Raised when a vital directory under the public root is absent."""

    def __init__(self, path: str) -> None:
        super().__init__(f"The (vital) directory '{path}' is not found")
        self.path = path


class FileNotFound(ScaffoldError):
    """Raised when a referenced public file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"{path} is not found")
        self.path = path


class UnsupportedCategory(ScaffoldError):
    """Raised when no HTML template exists for the requested asset category."""


class ManifestKeyNotFound(ScaffoldError):
    """Raised when the integrity manifest has no digest for a file."""

    def __init__(self, key: str) -> None:
        super().__init__(f"No digest recorded for '{key}'")
        self.key = key


class InvalidSource(ScaffoldError):
    status_code = 400


class KeyNotFound(ScaffoldError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Field '{key}' is not present in the submitted data")
        self.key = key


class RouteNotFound(ScaffoldError):
    status_code = 404


class TemplateNotFound(ScaffoldError):
    pass
