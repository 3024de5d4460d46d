from __future__ import annotations


class InstallError(RuntimeError):
    """Base class for failures raised while installing packages.

    ``code`` is a stable tag (e.g. ``MissingDestination``) that tests and the
    batch log can match on; the message is meant for humans.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class ConfigurationError(InstallError):
    """Malformed registry, unknown architecture/kind or missing options."""


class TemplateExpansionError(InstallError):
    pass


class TransportError(InstallError):
    pass


class FilesystemError(InstallError):
    pass


class ProcessError(InstallError):
    pass


class ToolMissingError(InstallError):
    pass


class BatchError(RuntimeError):
    """At least one requested package failed; details are in the log."""

    def __init__(self, message: str = "encountered errors installing packages (see the log for details)") -> None:
        super().__init__(message)
