"""Canonical Pydantic models shared across all restquery modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Operation metadata** -- produced by the OpenAPI extractor (or built by hand)
and consumed by the query builder:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`ParameterStyle`,
    :class:`APIParameter`, and :class:`APIOperation`.

**Configuration models** -- serialised as JSON in the user's config directory
or in a project-local ``restquery.json``:
    :class:`EncoderConfig` and :class:`GlobalConfig`.

Operation metadata is declared once per operation and never mutated, so those
models are frozen. Runtime arguments are deliberately *not* modelled here:
they stay a plain ``Mapping[str, str]`` kept apart from the descriptors.
"""

from __future__ import annotations

import enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# --- Operation metadata ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field.

    Only ``QUERY`` parameters are processed by the query builder; the others
    are carried so that a whole operation's parameter list can be modelled.
    """

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class ParameterStyle(str, enum.Enum):
    """Serialization styles named by the OpenAPI ``style`` field.

    The query builder implements ``SIMPLE`` only. The remaining members let
    the metadata model represent what a document declares; building a query
    string with one of them raises
    :class:`~restquery.exceptions.UnsupportedParameterStyleError`.
    """

    SIMPLE = "simple"
    FORM = "form"
    SPACE_DELIMITED = "spaceDelimited"
    PIPE_DELIMITED = "pipeDelimited"
    DEEP_OBJECT = "deepObject"
    MATRIX = "matrix"
    LABEL = "label"


class APIParameter(BaseModel):
    """Declared metadata for one operation parameter.

    Maps to an OpenAPI *Parameter Object*. The ``default`` value is used
    whenever the caller supplies no argument for the parameter, whether it is
    required or not; a supplied argument always wins.

    Example::

        APIParameter(name="q", required=True)
        APIParameter(name="limit", default="20")
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    location: ParameterLocation = ParameterLocation.QUERY
    required: bool = False
    default: Optional[str] = Field(
        default=None, description="Value used when no argument is supplied"
    )
    style: ParameterStyle = ParameterStyle.SIMPLE
    description: Optional[str] = None
    schema_type: str = Field(default="string", description="JSON Schema type")


class APIOperation(BaseModel):
    """A single REST operation (one URL path + HTTP method pair).

    ``parameters`` keeps the declaration order of the source document; that
    order is the order in which query entries are emitted.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    method: HTTPMethod = HTTPMethod.GET
    operation_id: Optional[str] = None
    server_url: Optional[str] = None
    description: Optional[str] = None
    parameters: list[APIParameter] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_parameters(self) -> APIOperation:
        seen: set[tuple[str, ParameterLocation]] = set()
        for param in self.parameters:
            key = (param.name, param.location)
            if key in seen:
                raise ValueError(
                    f"Duplicate {param.location.value} parameter '{param.name}'"
                )
            seen.add(key)
        return self

    @property
    def query_parameters(self) -> list[APIParameter]:
        """The query parameters, in declaration order."""
        return [p for p in self.parameters if p.location == ParameterLocation.QUERY]


# --- Configuration ---


class EncoderConfig(BaseModel):
    """Query builder settings.

    ``missing_required`` selects how missing required parameters are
    reported: ``"first"`` stops at the first one in declaration order,
    ``"all"`` finishes the pass and reports every one of them in a single
    error. ``default_style`` is the style the extractor assigns when a
    parameter object does not declare one.
    """

    missing_required: Literal["first", "all"] = Field(
        default="first", description="Report the first or all missing required parameters"
    )
    default_style: ParameterStyle = Field(
        default=ParameterStyle.SIMPLE,
        description="Style assumed for parameters that do not declare one",
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/restquery/config.json``.

    Loaded and saved by :func:`~restquery.config.load_global_config` and
    :func:`~restquery.config.save_global_config`. See
    :func:`~restquery.config.resolve_encoder_config` for the precedence chain.
    """

    encoder: EncoderConfig = Field(default_factory=EncoderConfig)
