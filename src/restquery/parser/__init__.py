"""OpenAPI metadata extraction.

Turns already ``$ref``-resolved OpenAPI parameter and operation objects into
the :class:`~restquery.models.APIParameter` and
:class:`~restquery.models.APIOperation` models consumed by the builders.
Loading documents and resolving references is left to the caller.
"""

from restquery.parser.extractor import extract_operation, extract_parameters

__all__ = ["extract_operation", "extract_parameters"]
