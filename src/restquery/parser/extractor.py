"""Extract parameter descriptors and operations from OpenAPI objects.

The input is a fully ``$ref``-resolved OpenAPI *Operation Object* (and
optionally its enclosing *Path Item Object*). The output is an
:class:`~restquery.models.APIOperation` whose ``parameters`` keep the
document's declaration order.

Parameter merging follows the OpenAPI specification: path-level parameters
provide defaults, and operation-level parameters override them when they share
the same ``name`` and ``in`` values.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from restquery.exceptions import SpecParseError
from restquery.models import (
    APIOperation,
    APIParameter,
    EncoderConfig,
    HTTPMethod,
    ParameterLocation,
    ParameterStyle,
)


def extract_operation(
    path: str,
    method: str,
    operation: dict[str, Any],
    path_item: Optional[dict[str, Any]] = None,
    server_url: Optional[str] = None,
    config: Optional[EncoderConfig] = None,
) -> APIOperation:
    """Build an :class:`~restquery.models.APIOperation` from an OpenAPI operation.

    Args:
        path: The URL path template the operation lives under (e.g. ``/pets/{id}``).
        method: The HTTP method, case-insensitive.
        operation: The raw *Operation Object*.
        path_item: The enclosing *Path Item Object*, whose ``parameters``
            apply to every operation under the path.
        server_url: Base URL of the server the operation is invoked against.
        config: Encoder settings; ``default_style`` is assigned to parameters
            that do not declare a style. Defaults to
            :class:`~restquery.models.EncoderConfig`.

    Returns:
        The extracted operation.

    Raises:
        SpecParseError: The method is unknown or a parameter object is invalid.
    """
    try:
        http_method = HTTPMethod(method.lower())
    except ValueError as exc:
        raise SpecParseError(f"Unsupported HTTP method '{method}' for path '{path}'") from exc

    path_params = (path_item or {}).get("parameters", [])
    merged = _merge_parameters(path_params, operation.get("parameters", []))

    try:
        return APIOperation(
            path=path,
            method=http_method,
            operation_id=operation.get("operationId"),
            server_url=server_url,
            description=operation.get("description") or operation.get("summary"),
            parameters=extract_parameters(merged, config),
        )
    except ValueError as exc:
        raise SpecParseError(f"Invalid operation {http_method.value.upper()} {path}: {exc}") from exc


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field). Overridden entries keep the position of
    the path-level declaration.
    """
    op_lookup: dict[tuple[str, str], dict[str, Any]] = {}
    for param in op_params:
        key = (param.get("name", ""), param.get("in", "query"))
        op_lookup[key] = param

    merged: list[dict[str, Any]] = []
    used: set[tuple[str, str]] = set()
    for param in path_params:
        key = (param.get("name", ""), param.get("in", "query"))
        if key in op_lookup:
            merged.append(op_lookup[key])
            used.add(key)
        else:
            merged.append(param)

    for param in op_params:
        key = (param.get("name", ""), param.get("in", "query"))
        if key not in used:
            merged.append(param)

    return merged


def extract_parameters(
    params_list: list[dict[str, Any]],
    config: Optional[EncoderConfig] = None,
) -> list[APIParameter]:
    """Convert raw OpenAPI parameter dicts into :class:`~restquery.models.APIParameter` models.

    Path parameters are always required regardless of the ``required`` field
    in the source. Parameters with unrecognised ``in`` locations are silently
    skipped.

    Args:
        params_list: Raw parameter dictionaries, in declaration order.
        config: Encoder settings; ``default_style`` is assigned when a
            parameter has no ``style``.

    Returns:
        A list of :class:`~restquery.models.APIParameter` instances.

    Raises:
        SpecParseError: A parameter is an unresolved ``$ref``, has no name,
            or declares an unknown style.
    """
    default_style = (config or EncoderConfig()).default_style
    parameters: list[APIParameter] = []

    for param in params_list:
        if "$ref" in param:
            raise SpecParseError(f"Unresolved parameter reference '{param['$ref']}'")

        name = param.get("name", "")
        if not name:
            raise SpecParseError("Parameter object without a name")

        try:
            location = ParameterLocation(param.get("in", "query"))
        except ValueError:
            continue

        style_str = param.get("style")
        if style_str is None:
            style = default_style
        else:
            try:
                style = ParameterStyle(style_str)
            except ValueError as exc:
                raise SpecParseError(
                    f"Unknown style '{style_str}' for parameter '{name}'"
                ) from exc

        schema = param.get("schema", {})
        default = schema.get("default") if isinstance(schema, dict) else None

        required = bool(param.get("required", False))
        if location == ParameterLocation.PATH:
            required = True

        parameters.append(
            APIParameter(
                name=name,
                location=location,
                required=required,
                default=_stringify_default(default),
                style=style,
                description=param.get("description"),
                schema_type=_extract_schema_type(schema),
            )
        )

    return parameters


def _stringify_default(value: Any) -> Optional[str]:
    """Render a schema default as the plain text sent on the wire."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _extract_schema_type(schema: Any) -> str:
    """Extract the type string from a schema object.

    Handles OpenAPI 3.1 type arrays (e.g., ["string", "null"]) by returning
    the first non-null type. Falls back to "string" if type is missing.
    """
    if not isinstance(schema, dict):
        return "string"

    type_value = schema.get("type", "string")

    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return non_null[0] if non_null else "string"

    return str(type_value)
