"""Exceptions raised by the rewind pipeline."""


class InvalidPeriodError(ValueError):
    """Raised when a period selector is not one of week, month or year."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown period {value!r}; expected one of: week, month, year")


class DataSourceError(Exception):
    """Raised by a data source when a table scan cannot be completed."""

    def __init__(self, resource: str, message: str):
        self.resource = resource
        super().__init__(f"{resource}: {message}")
