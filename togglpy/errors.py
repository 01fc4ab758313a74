"""Exceptions raised by togglPy."""


class TogglError(Exception):
    """Base class for all togglPy errors."""


class ConfigIoError(TogglError):
    """A config directory or file could not be read or written."""


class ConfigParseError(TogglError):
    """A recognized config key holds a value of the wrong type."""


class RecordParseError(TogglError):
    """A time entry record returned by the API could not be decoded."""


class MissingPrecondition(TogglError):
    """An operation needs a setting that the effective config does not provide."""


class ApiError(TogglError):
    """A request to the Toggl API failed."""


class ExportError(TogglError):
    """A report could not be exported to a file."""


def cause_chain(error: BaseException) -> list:
    """Collect the messages of an exception and its chained causes.

    Args:
        error: Exception to unwind

    Returns:
        List of messages, outermost first
    """
    messages = []
    seen = set()
    current = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        messages.append(str(current) or current.__class__.__name__)
        current = current.__cause__ or current.__context__
    return messages
