"""
Custom exceptions for PharmaTrack.
Provides specific error types for different failure scenarios.
"""
from typing import Dict, Optional


class PharmaTrackException(Exception):
    """Base exception for all application errors."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationException(PharmaTrackException):
    """Raised when drug input fails validation. Carries per-field messages."""
    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        self.errors = errors or {}
        super().__init__(message)


class DrugNotFoundException(PharmaTrackException):
    """Raised when a drug is not found in the inventory."""
    pass


class StorageUnavailableException(PharmaTrackException):
    """Raised when durable storage cannot be read or written."""
    pass


class DeserializationException(PharmaTrackException):
    """Raised when persisted bytes do not decode to an inventory."""
    pass
