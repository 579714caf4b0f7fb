"""Exceptions raised by the benchmarking harness."""


class ConfigurationError(ValueError):
    """
    Raised when an index or run configuration names an unknown token.

    Attributes:
        field: Name of the offending configuration field
        value: The rejected value
    """

    def __init__(self, field: str, value: object, message: str = ""):
        self.field = field
        self.value = value
        super().__init__(message or f"unknown {field.replace('_', ' ')}: {value}")
