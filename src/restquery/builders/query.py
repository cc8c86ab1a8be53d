"""Build the query-string suffix of a REST operation's request URL.

The single entry point for most callers is :func:`build_query_string`;
:class:`QueryStringBuilder` is the reusable object behind it. Given the
declared parameters of an operation and a mapping of caller-supplied
arguments, the builder walks the query parameters in declaration order and,
for each one:

1. uses the argument when one is supplied under the parameter's name,
2. otherwise falls back to the declared default,
3. otherwise treats the parameter as absent -- skipped when optional, an
   error when required.

Resolved values are encoded according to the parameter's style and emitted
as ``name=value`` entries joined by ``&``. The result has no leading ``?``
and is the empty string when nothing was emitted.

Descriptors and arguments are never merged into one mapping before the walk:
"argument present" and "default present" stay two separate fallback tiers.

The builder holds nothing but an immutable :class:`~restquery.models.EncoderConfig`
and may be shared freely between threads.

Example::

    from restquery.builders import build_query_string
    from restquery.models import APIParameter

    params = [APIParameter(name="q", required=True), APIParameter(name="page", default="1")]
    build_query_string(params, {"q": "a/b"})   # "q=a%2fb&page=1"
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Mapping, Optional, Sequence, Union
from urllib.parse import quote

from restquery.exceptions import (
    InvalidParameterValueError,
    MissingRequiredParameterError,
    QueryBuildError,
    UnsupportedParameterStyleError,
)
from restquery.models import (
    APIOperation,
    APIParameter,
    EncoderConfig,
    ParameterLocation,
    ParameterStyle,
)

logger = logging.getLogger(__name__)

_ESCAPE_RE = re.compile(r"%[0-9A-F]{2}")


def encode_simple(value: str) -> str:
    """Percent-encode *value* for use as a ``simple`` style query value.

    Every character outside the RFC 3986 unreserved set
    (``A-Z a-z 0-9 - . _ ~``) is UTF-8 encoded and escaped, using lower-case
    hex digits: ``:`` becomes ``%3a``, ``/`` becomes ``%2f``, ``?`` becomes
    ``%3f`` and ``#`` becomes ``%23``. The value is emitted as plain text and
    never wrapped in quotes.

    Args:
        value: The raw argument or default value.

    Returns:
        The encoded value.
    """
    return _ESCAPE_RE.sub(lambda m: m.group(0).lower(), quote(value, safe=""))


_STYLE_ENCODERS: dict[ParameterStyle, Callable[[str], str]] = {
    ParameterStyle.SIMPLE: encode_simple,
}
"""Encoders for every supported style. Styles missing here are rejected."""


class QueryStringBuilder:
    """Builds encoded query strings from operation metadata and arguments.

    Args:
        config: Encoder settings. Defaults to :class:`~restquery.models.EncoderConfig`
            with fail-fast reporting of missing required parameters.
    """

    def __init__(self, config: Optional[EncoderConfig] = None) -> None:
        self._config = config or EncoderConfig()

    @property
    def config(self) -> EncoderConfig:
        return self._config

    def build(self, operation: APIOperation, arguments: Mapping[str, str]) -> str:
        """Build the query string for *operation*.

        Only the operation's query parameters take part; path, header and
        cookie parameters are ignored.

        Args:
            operation: The operation whose parameters are encoded.
            arguments: Caller-supplied values keyed by parameter name.

        Returns:
            The encoded query string, without a leading ``?``.

        Raises:
            MissingRequiredParameterError: A required query parameter has
                neither an argument nor a default.
            UnsupportedParameterStyleError: A parameter declares a style
                with no encoder.
            InvalidParameterValueError: A value cannot be encoded (for
                example a lone surrogate).
            QueryBuildError: A query parameter name is declared twice.

        With ``missing_required="all"`` the whole list is traversed and
        missing required parameters are reported ahead of any encoding
        error; otherwise the first failure in declaration order is raised.
        """
        logger.debug(
            "Building query string for operation '%s'",
            operation.operation_id or operation.path,
        )
        return self.build_from_parameters(operation.parameters, arguments)

    def build_from_parameters(
        self,
        parameters: Sequence[APIParameter],
        arguments: Mapping[str, str],
    ) -> str:
        """Build the query string from an ordered list of descriptors.

        Non-query descriptors in *parameters* are skipped, so both a whole
        operation's list and a pre-filtered list are accepted. Query
        parameter names must be unique, as in
        :class:`~restquery.models.APIOperation`. An argument whose value is
        ``None`` counts as not supplied.

        Raises:
            MissingRequiredParameterError: See :meth:`build`.
            UnsupportedParameterStyleError: See :meth:`build`.
            InvalidParameterValueError: See :meth:`build`.
            QueryBuildError: See :meth:`build`.
        """
        report_all = self._config.missing_required == "all"
        entries: list[str] = []
        missing: list[str] = []
        deferred: Optional[QueryBuildError] = None
        known: set[str] = set()

        for param in parameters:
            if param.location != ParameterLocation.QUERY:
                continue
            if param.name in known:
                raise QueryBuildError(f"Duplicate query parameter '{param.name}'")
            known.add(param.name)

            value = arguments.get(param.name)
            if value is None and param.default is not None:
                logger.debug("Using default value for query parameter '%s'", param.name)
                value = param.default

            if value is None:
                if param.required:
                    if not report_all:
                        raise MissingRequiredParameterError(param.name)
                    missing.append(param.name)
                else:
                    logger.debug("Skipping optional query parameter '%s'", param.name)
                continue

            try:
                entries.append(f"{param.name}={_encode(param, value)}")
            except QueryBuildError as exc:
                if not report_all:
                    raise
                # Missing required parameters are reported ahead of encoding errors.
                if deferred is None:
                    deferred = exc

        if missing:
            raise MissingRequiredParameterError(missing[0], missing)
        if deferred is not None:
            raise deferred

        ignored = [name for name in arguments if name not in known]
        if ignored:
            logger.debug("Ignoring arguments with no query parameter: %s", sorted(ignored))

        return "&".join(entries)


def _encode(param: APIParameter, value: str) -> str:
    """Encode *value* with the encoder registered for the parameter's style."""
    encoder = _STYLE_ENCODERS.get(param.style)
    if encoder is None:
        raise UnsupportedParameterStyleError(param.style.value, param.name)
    try:
        return encoder(value)
    except UnicodeEncodeError as exc:
        raise InvalidParameterValueError(param.name, str(exc)) from exc


def build_query_string(
    source: Union[APIOperation, Sequence[APIParameter]],
    arguments: Mapping[str, str],
    config: Optional[EncoderConfig] = None,
) -> str:
    """Build an encoded query string for an operation or a descriptor list.

    A convenience wrapper around :class:`QueryStringBuilder`.

    Args:
        source: An :class:`~restquery.models.APIOperation`, or an ordered
            sequence of :class:`~restquery.models.APIParameter`.
        arguments: Caller-supplied values keyed by parameter name.
        config: Optional encoder settings.

    Returns:
        The encoded query string, without a leading ``?``.
    """
    builder = QueryStringBuilder(config)
    if isinstance(source, APIOperation):
        return builder.build(source, arguments)
    return builder.build_from_parameters(source, arguments)
