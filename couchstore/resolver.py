"""
Collection name and URI resolution
"""

from typing import Any, Iterable, Mapping, Optional, Union
from urllib.parse import quote

from .exceptions import ValidationError


def full_collection_name(collection: Any, prefix: Optional[str] = None) -> str:
    """
    Fully qualified collection name

    Args:
        collection: Collection name, or an object with ``table`` and
                    ``table_prefix`` attributes (e.g. a Model)
        prefix: Source-level prefix, applied to plain names only

    Returns:
        Collection name including any prefix
    """
    if hasattr(collection, "table"):
        name = (getattr(collection, "table_prefix", "") or "") + str(collection.table or "")
    elif prefix:
        name = prefix + str(collection)
    else:
        name = str(collection)

    if not name:
        raise ValidationError("Collection name is required")

    return name


def uri(collection: Any, prefix: Optional[str] = None) -> str:
    """Path of the collection root"""
    return "/" + full_collection_name(collection, prefix)


def record_uri(collection: Any, id: Any, prefix: Optional[str] = None) -> str:
    """Path of a single document"""
    return uri(collection, prefix) + "/" + quote(str(id))


def query_uri(
    collection: Any,
    query: Optional[Union[Mapping[str, Any], Iterable[Any]]] = None,
    prefix: Optional[str] = None
) -> str:
    """
    Path built from the collection root and the ordered query values

    ``{"id": "k"}`` and ``["k"]`` both address ``/<collection>/k``;
    ``["_all_docs"]`` addresses the collection's document index. An empty
    query addresses the collection's own metadata document.
    """
    if query is None:
        parts = []
    elif isinstance(query, Mapping):
        parts = list(query.values())
    elif isinstance(query, (str, bytes)):
        parts = [query]
    else:
        parts = list(query)

    return uri(collection, prefix) + "/" + "/".join(quote(str(part)) for part in parts)
