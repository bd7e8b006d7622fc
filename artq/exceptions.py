"""Exception hierarchy for artq."""

from pathlib import Path


class ArtqError(Exception):
    """Base exception for all artq errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all artq errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(ArtqError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Query compilation Errors
class QueryError(ArtqError):
    """Errors raised while compiling a pattern into a query."""

    pass


class PropertyFilterError(QueryError):
    """A ``key=value`` property entry is missing its delimiter."""

    def __init__(self, fragment: str) -> None:
        self.fragment = fragment
        super().__init__(f"Invalid property '{fragment}': expected key=value")


class SpecEntryError(QueryError):
    """A spec entry could not be compiled."""

    def __init__(self, index: int, fragment: str, reason: str) -> None:
        self.index = index
        self.fragment = fragment
        self.reason = reason
        super().__init__(f"Spec entry #{index + 1} ({fragment!r}): {reason}")


# Spec file Errors
class SpecError(ArtqError):
    """Specification file errors."""

    pass


class MalformedSpecFileError(SpecError):
    """Spec file cannot be deserialized or holds no entries."""

    def __init__(self, path: Path | str, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid spec file {path}: {detail}")


# Build info Errors
class BuildInfoError(ArtqError):
    """Build info collection or publishing errors."""

    pass


class BuildDataNotFoundError(BuildInfoError):
    """No recorded data exists for the build."""

    def __init__(self, build_name: str, build_number: str) -> None:
        self.build_name = build_name
        self.build_number = build_number
        super().__init__(
            f"Can't find any files related to build name: {build_name!r}, "
            f"number: {build_number!r}"
        )


# Server Errors
class ServerError(ArtqError):
    """Errors talking to the repository server."""

    pass


class ServerConnectionError(ServerError):
    """The request never produced a response."""

    pass


class ServerRejectionError(ServerError):
    """The server answered with an unexpected status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Server response: HTTP {status_code}\n{body}")
