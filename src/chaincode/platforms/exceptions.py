class PlatformError(Exception):
    pass


class InvalidInputError(PlatformError):
    pass


class PackagingIOError(PlatformError):
    pass


class BuildError(PlatformError):
    pass


class UnknownPlatformError(PlatformError):
    pass


class ValidationError(PlatformError):
    pass


class MalformedArchiveError(ValidationError):
    pass


class PolicyViolationError(ValidationError):
    def __init__(self, message: str, path: str, mode: int | None = None) -> None:
        super().__init__(message)
        self.path = path
        self.mode = mode
