"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""


class ConfigurationError(UtilError):
    """Settings could not be loaded from the environment.

    Only the failing setting paths are kept; values may be secrets.
    """

    def __init__(self, fields: list[str]) -> None:
        super().__init__(f"Invalid configuration for: {', '.join(fields)}")
        self.fields = fields
