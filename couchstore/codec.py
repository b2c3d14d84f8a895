"""
JSON codec for CouchDB documents
"""

import json
import logging
from typing import Any, Mapping, Optional, Union

logger = logging.getLogger(__name__)


def encode(record: Mapping[str, Any]) -> bytes:
    """
    Serialize a record to a UTF-8 JSON body

    Args:
        record: Field mapping (must be JSON serializable)

    Returns:
        Encoded body

    Raises:
        ValueError: NaN or infinite floats, which JSON cannot carry
    """
    return json.dumps(record, ensure_ascii=False, allow_nan=False).encode("utf-8")


def decode(data: Optional[Union[bytes, str]]) -> Any:
    """
    Decode a response body into plain Python values

    Malformed or empty input decodes to None rather than raising, so
    callers can probe the shape of whatever came back.
    """
    if not data:
        return None

    try:
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return json.loads(data)
    except (UnicodeDecodeError, ValueError) as e:
        logger.warning(f"Could not decode response body: {e}")
        return None
