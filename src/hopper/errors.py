"""Error taxonomy shared by the registry, selection and navigation layers."""


class HopperError(Exception):
    """Base class for every error raised by hopper's core."""


class DuplicateNameError(HopperError):
    """Raised when an instance name is already taken."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Instance '{name}' already exists")
        self.name = name


class InstanceNotFoundError(HopperError):
    """Raised when a name is not present in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No instance named '{name}'")
        self.name = name


class ChooserCancelledError(HopperError):
    """Raised when the user aborts a chooser prompt."""


class NoInstancesDefinedError(HopperError):
    """Raised when a choice is requested but the registry is empty."""

    def __init__(self) -> None:
        super().__init__("No instances defined")


class InvalidPatternError(HopperError):
    """Raised for empty names, empty patterns and uncompilable regexps."""


class PersistenceError(HopperError):
    """Raised when the registry store fails to save a mutation."""
