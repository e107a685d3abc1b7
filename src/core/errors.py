from __future__ import annotations


class StoreError(Exception):
    """Base error for the cache and job stores."""


class ValidationError(StoreError):
    """Raised when a key or other caller input is invalid."""


class NotFoundError(StoreError):
    """Raised when a job is unknown or has already expired."""


class NotReadyError(StoreError):
    """Raised when a job exists but has not completed yet."""


class EmptyResultError(StoreError):
    """Raised when a job completed but produced no content."""


class ProducerFailureError(StoreError):
    """Raised when a job's producer failed or was cancelled."""


class JobCancelledError(StoreError):
    """Raised by producers that observed a cancellation request."""


class RegistryClosedError(StoreError):
    """Raised when work is submitted to a registry that has been shut down."""
