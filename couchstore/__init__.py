"""
CouchStore - CouchDB datasource for Python
Record-oriented CRUD on top of CouchDB's HTTP API
"""

__version__ = "1.0.0"

from .source import CouchSource
from .client import CouchClient
from .config import ConnectionSettings
from .models import Model, Result, StoreFailure, TransportFailure, ConnectionState
from .exceptions import (
    CouchStoreError,
    TransportError,
    StoreError,
    ValidationError,
    NotConnectedError
)

__all__ = [
    "CouchSource",
    "CouchClient",
    "ConnectionSettings",
    "Model",
    "Result",
    "StoreFailure",
    "TransportFailure",
    "ConnectionState",
    "CouchStoreError",
    "TransportError",
    "StoreError",
    "ValidationError",
    "NotConnectedError"
]
