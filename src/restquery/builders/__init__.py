"""Request-component builders for REST operations.

Currently provides the query-string builder, which turns an operation's
declared query parameters plus caller-supplied arguments into the encoded
suffix that follows ``?`` in the request URL.

Example::

    from restquery.builders import QueryStringBuilder

    builder = QueryStringBuilder()
    query = builder.build(operation, {"p1": "v1"})
"""

from restquery.builders.query import QueryStringBuilder, build_query_string, encode_simple

__all__ = ["QueryStringBuilder", "build_query_string", "encode_simple"]
