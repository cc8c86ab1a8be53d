"""Exception hierarchy for restquery.

All exceptions inherit from :class:`RestQueryError` so that callers can catch
every library failure with a single ``except`` clause. Query-building
failures share the :class:`QueryBuildError` base; they are caller-input
errors and are never retried by the library, since encoding is
deterministic and a retry reproduces the same failure.

Subclass hierarchy::

    RestQueryError
    +-- ConfigError
    +-- SpecParseError
    +-- QueryBuildError
        +-- MissingRequiredParameterError
        +-- InvalidParameterValueError
        +-- UnsupportedParameterStyleError
"""

from __future__ import annotations

from typing import Optional, Sequence


class RestQueryError(Exception):
    """Base exception for all restquery errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(RestQueryError):
    """Raised for configuration problems (invalid JSON, bad values, unreadable files)."""


class SpecParseError(RestQueryError):
    """Raised when OpenAPI parameter metadata cannot be turned into descriptors."""


class QueryBuildError(RestQueryError):
    """Base class for failures raised while building a query string."""


class MissingRequiredParameterError(QueryBuildError):
    """Raised when a required query parameter has neither an argument nor a default.

    ``name`` is the first missing parameter in declaration order. ``names``
    holds every missing parameter found before the build stopped; it has a
    single entry unless the encoder is configured to report all of them.

    Args:
        name: The first missing parameter.
        names: All missing parameters, in declaration order.
    """

    def __init__(self, name: str, names: Optional[Sequence[str]] = None):
        self.name = name
        self.names: tuple[str, ...] = tuple(names) if names else (name,)
        if len(self.names) == 1:
            message = f"No argument or default value is provided for the required query parameter '{name}'"
        else:
            listed = ", ".join(f"'{n}'" for n in self.names)
            message = f"No argument or default value is provided for the required query parameters {listed}"
        super().__init__(message)


class InvalidParameterValueError(QueryBuildError):
    """Raised when a resolved value cannot be encoded (e.g. it holds a lone surrogate).

    Args:
        parameter: Name of the parameter whose value failed.
        reason: Description of the encoding failure.
    """

    def __init__(self, parameter: str, reason: str):
        self.parameter = parameter
        super().__init__(f"Cannot encode value of query parameter '{parameter}': {reason}")


class UnsupportedParameterStyleError(QueryBuildError):
    """Raised when a descriptor declares a style the encoder has no encoding for.

    Args:
        style: The offending style value.
        parameter: Name of the parameter that declared it.
    """

    def __init__(self, style: str, parameter: Optional[str] = None):
        self.style = style
        self.parameter = parameter
        message = f"Unsupported query parameter style '{style}'"
        if parameter is not None:
            message += f" for parameter '{parameter}'"
        super().__init__(message)
