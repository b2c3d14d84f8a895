"""
CouchDB datasource
Maps record CRUD operations onto the CouchDB HTTP API
"""

import logging
from typing import Dict, Any, List, Optional, Iterable, Mapping, Callable

from pydantic import ValidationError as PydanticValidationError

from .cache import MetadataCache
from .client import CouchClient
from .codec import encode, decode
from .config import ConnectionSettings
from .exceptions import TransportError, ValidationError, NotConnectedError
from .models import ConnectionState, Result
from . import resolver

logger = logging.getLogger(__name__)

# Value of the "couchdb" field in the server's welcome document
WELCOME = "Welcome"

# Listing endpoint for every database on the server
ALL_DBS = "/_all_dbs"

class CouchSource:
    """
    Datasource for a CouchDB server

    Every collection is a CouchDB database and every record a document.
    Updates and deletes always fetch the document's current revision
    before writing, since CouchDB rejects writes with a stale ``_rev``.

    Example:
        >>> source = CouchSource({"host": "localhost", "port": 5984})
        >>> created = source.create("posts", {"title": "a post"})
        >>> source.update("posts", {"id": created.id, "title": "edited"})
        >>> source.delete("posts", created.id)
    """

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        auto_connect: bool = True,
        client_factory: Callable[[ConnectionSettings], Any] = CouchClient
    ):
        """
        Initialize CouchSource

        Args:
            config: Connection settings overriding the defaults
            auto_connect: Connect immediately (default: True)
            client_factory: Builds the transport from settings
        """
        self.config = ConnectionSettings().merge(config)
        self.client_factory = client_factory
        self.client = None
        self.state = ConnectionState.DISCONNECTED
        self.cache = MetadataCache()

        if auto_connect:
            self.connect()

    # ========================================================================
    # CONNECTION
    # ========================================================================

    @property
    def connected(self) -> bool:
        return self.state == ConnectionState.CONNECTED

    def connect(self, config: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Connect to the server

        Probes the server root and checks for CouchDB's welcome document.
        An unreachable or unrecognized server, or invalid settings, leave
        the source disconnected; no exception escapes.

        Args:
            config: Settings to apply over the current ones

        Returns:
            True if connected, False otherwise
        """
        if self.connected:
            return True

        if config:
            try:
                self.config = self.config.merge(config)
            except PydanticValidationError as e:
                logger.warning(f"Invalid connection settings: {e}")
                return self.connected

        self.state = ConnectionState.CONNECTING
        self.client = self.client_factory(self.config)

        try:
            welcome = decode(self.client.get("/"))
        except TransportError as e:
            logger.warning(f"Connection to {self.config.display_url} failed: {e.message}")
            welcome = None

        if isinstance(welcome, dict) and welcome.get("couchdb") == WELCOME:
            self.state = ConnectionState.CONNECTED
            logger.info(f"Connected to CouchDB {welcome.get('version', '')} at {self.config.display_url}")
        else:
            if welcome is not None:
                logger.warning(f"No CouchDB server at {self.config.display_url}")
            self._release()
            self.state = ConnectionState.DISCONNECTED

        return self.connected

    def disconnect(self) -> bool:
        """
        Disconnect from the server

        Returns:
            Always True
        """
        self._release()
        self.state = ConnectionState.DISCONNECTED
        logger.info(f"Disconnected from {self.config.display_url}")
        return True

    def close(self) -> bool:
        """Alias for disconnect()"""
        return self.disconnect()

    def _release(self):
        if self.client is not None and hasattr(self.client, "close"):
            self.client.close()
        self.client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.disconnect()

    # ========================================================================
    # NAMING
    # ========================================================================

    def full_collection_name(self, collection: Any) -> str:
        """Collection name including any prefix"""
        return resolver.full_collection_name(collection, self.config.prefix)

    def uri(self, collection: Any) -> str:
        """Path of the collection root"""
        return resolver.uri(collection, self.config.prefix)

    def record_uri(self, collection: Any, id: Any) -> str:
        """Path of a single document"""
        return resolver.record_uri(collection, id, self.config.prefix)

    # ========================================================================
    # METADATA
    # ========================================================================

    def list_sources(self) -> List[str]:
        """
        List every database on the server

        Cached after the first successful call.

        Example:
            >>> "posts" in source.list_sources()
            True
        """
        def load():
            result = self._exchange("GET", ALL_DBS)
            if result.succeeded and isinstance(result.payload, list):
                return result.payload
            logger.warning(f"Could not list databases: {result.failure}")
            return None

        return self.cache.get_sources(load)

    list_collections = list_sources

    def describe(self, collection: Any) -> Dict[str, Any]:
        """
        Metadata document of a collection (db_name, doc_count, ...)

        Cached per collection after the first successful call.
        """
        name = self.full_collection_name(collection)

        def load():
            result = self.read(collection)
            if result.succeeded and isinstance(result.payload, dict):
                return dict(result.payload)
            logger.warning(f"Could not describe {name}: {result.failure}")
            return None

        return self.cache.get_description(name, load)

    # ========================================================================
    # RECORDS
    # ========================================================================

    def create(
        self,
        collection: Any,
        data: Optional[Mapping[str, Any]] = None,
        fields: Optional[Iterable[str]] = None,
        values: Optional[Iterable[Any]] = None
    ) -> Result:
        """
        Create a document

        A record carrying an ``id`` is written with update() instead,
        creating or replacing the document at that id.

        Args:
            collection: Collection name or Model
            data: Record fields (default: the Model's data)
            fields: Field names, paired with ``values``
            values: Field values, paired with ``fields``

        Returns:
            Result, ``{"ok": true, "id": ..., "rev": ...}`` on success
        """
        record = self._record(collection, data, fields, values)

        if record.get("id") is not None:
            return self.update(collection, record)

        return self._exchange("POST", self.uri(collection), body=encode(record))

    def read(
        self,
        collection: Any,
        query: Optional[Any] = None
    ) -> Result:
        """
        Read a document or any other path below the collection

        Args:
            collection: Collection name or Model
            query: Ordered path parts, e.g. ``["k"]``, ``{"id": "k"}``
                   or ``["_all_docs"]``; empty reads the collection itself

        Returns:
            Result with the decoded response
        """
        return self._exchange("GET", resolver.query_uri(collection, query, self.config.prefix))

    def update(
        self,
        collection: Any,
        data: Optional[Mapping[str, Any]] = None,
        fields: Optional[Iterable[str]] = None,
        values: Optional[Iterable[Any]] = None
    ) -> Result:
        """
        Write a document at the record's ``id``

        The current revision is read first and replaces any ``_rev`` the
        caller supplied. A missing document is created at that id.

        Raises:
            ValidationError: The record has no id

        Returns:
            Result, ``{"ok": true, "id": ..., "rev": ...}`` on success
        """
        record = self._record(collection, data, fields, values)
        id = record.pop("id", None)
        if id is None or id == "":
            raise ValidationError("Document id is required for update")

        current = self.read(collection, [id])
        if current.succeeded:
            rev = current.get("_rev")
            logger.debug(f"Current revision of {id}: {rev}")
            if rev is None:
                record.pop("_rev", None)
            else:
                record["_rev"] = rev
        elif current.error == "not_found":
            record.pop("_rev", None)
        else:
            return current

        return self._exchange("PUT", self.record_uri(collection, id), body=encode(record))

    def delete(self, collection: Any, id: Optional[Any] = None) -> Result:
        """
        Delete a document

        Args:
            collection: Collection name or Model
            id: Document id (default: the Model's id)

        Raises:
            ValidationError: No id given or found on the Model

        Returns:
            Result, ``{"ok": true, "id": ..., "rev": ...}`` on success
        """
        if id is None:
            id = getattr(collection, "id", None)
        if id is None:
            id = (getattr(collection, "data", None) or {}).get("id")
        if id is None or id == "":
            raise ValidationError("Document id is required for delete")

        current = self.read(collection, [id])
        if not current.succeeded:
            return current

        rev = current.get("_rev")
        logger.debug(f"Current revision of {id}: {rev}")

        return self._exchange("DELETE", self.record_uri(collection, id), params={"rev": rev})

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _record(self, collection, data, fields, values) -> Dict[str, Any]:
        if fields is not None and values is not None:
            fields = list(fields)
            values = list(values)
            if len(fields) != len(values):
                raise ValidationError("Fields and values must have the same length")
            record = dict(zip(fields, values))
        else:
            if data is None:
                data = getattr(collection, "data", None)
            if data is None:
                data = {}
            if not isinstance(data, Mapping):
                raise ValidationError("Record data must be a dictionary")
            record = dict(data)

        # A Model's own id stands in for a missing one
        if record.get("id") in (None, ""):
            record.pop("id", None)
            id = getattr(collection, "id", None)
            if id not in (None, ""):
                record["id"] = id

        return record

    def _exchange(
        self,
        method: str,
        path: str,
        body: Optional[bytes] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Result:
        if self.client is None:
            raise NotConnectedError(f"Not connected to {self.config.display_url}")

        try:
            if method == "GET":
                raw = self.client.get(path, params=params)
            elif method == "POST":
                raw = self.client.post(path, body)
            elif method == "PUT":
                raw = self.client.put(path, body)
            elif method == "DELETE":
                raw = self.client.delete(path, params=params)
            else:
                raise ValueError(f"Unsupported method: {method}")
        except TransportError as e:
            logger.warning(f"{method} {path} failed: {e.message}")
            return Result.from_error(e)

        return Result.from_payload(decode(raw))
