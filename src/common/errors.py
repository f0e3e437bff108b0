"""Exceptions raised while reading or writing project files."""


class DepsyncFileError(ValueError):
    """A manifest or lockfile could not be read, parsed or written."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ManifestError(DepsyncFileError):
    """package.json is missing, unreadable or not a JSON object."""


class LockfileError(DepsyncFileError):
    """package-lock.json is missing, unreadable or malformed."""
