"""Exceptions raised by pyfree."""


class FreeError(Exception):
    """Base class for every error that ends a pyfree run."""


class ConfigurationError(FreeError):
    """The command line options cannot be combined."""


class MultipleUnitsError(ConfigurationError):
    """More than one display unit was requested."""

    def __init__(self) -> None:
        super().__init__("multiple unit options doesn't make sense")


class SourceReadError(FreeError):
    """The memory statistics could not be obtained."""


class MissingFieldError(FreeError):
    """A field required to build the report is absent from the statistics."""

    def __init__(self, field: str) -> None:
        super().__init__(f"missing required field '{field}'")
        self.field = field
