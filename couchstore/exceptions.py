"""
Custom exceptions for CouchStore
"""

class CouchStoreError(Exception):
    """Base exception for all CouchStore errors"""
    def __init__(self, message: str, status_code: int = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

class TransportError(CouchStoreError):
    """Raised when the HTTP exchange with CouchDB fails"""
    pass

class StoreError(CouchStoreError):
    """Raised on demand for error documents returned by CouchDB"""
    def __init__(self, message: str, error: str = None, reason: str = None, status_code: int = None):
        self.error = error
        self.reason = reason
        super().__init__(message, status_code=status_code)

class ValidationError(CouchStoreError, ValueError):
    """Raised when an operation is called without its required input"""
    pass

class NotConnectedError(CouchStoreError):
    """Raised when an operation needs a transport but the source is disconnected"""
    pass
