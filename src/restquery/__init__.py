"""restquery -- Encode REST operation query parameters into URL query strings.

Given the declared parameters of an OpenAPI operation and a mapping of
caller-supplied argument values, restquery produces the exact query-string
suffix to append after ``?`` in the request URL: arguments win over declared
defaults, optional parameters without a value are omitted, declaration order
is preserved, and values are percent-encoded per their serialization style.

Typical usage::

    from restquery import APIParameter, build_query_string

    params = [APIParameter(name="q", required=True), APIParameter(name="page")]
    build_query_string(params, {"q": "a#b"})   # "q=a%23b"

Modules:
    models: Pydantic models for operation metadata and configuration.
    builders: The query-string builder.
    parser: Extraction of descriptors from OpenAPI parameter objects.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy.
"""

__version__ = "0.1.0"

from restquery.builders.query import QueryStringBuilder, build_query_string, encode_simple
from restquery.exceptions import (
    ConfigError,
    InvalidParameterValueError,
    MissingRequiredParameterError,
    QueryBuildError,
    RestQueryError,
    SpecParseError,
    UnsupportedParameterStyleError,
)
from restquery.models import (
    APIOperation,
    APIParameter,
    EncoderConfig,
    HTTPMethod,
    ParameterLocation,
    ParameterStyle,
)

__all__ = [
    "APIOperation",
    "APIParameter",
    "ConfigError",
    "EncoderConfig",
    "HTTPMethod",
    "InvalidParameterValueError",
    "MissingRequiredParameterError",
    "ParameterLocation",
    "ParameterStyle",
    "QueryBuildError",
    "QueryStringBuilder",
    "RestQueryError",
    "SpecParseError",
    "UnsupportedParameterStyleError",
    "build_query_string",
    "encode_simple",
]
