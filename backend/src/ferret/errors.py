"""Exception types raised by providers and the request layer."""

from __future__ import annotations


class FerretError(Exception):
    """Base class for all Ferret errors."""


class CompletionError(FerretError):
    """The completion provider call failed. Fatal to the current request."""


class ToolProviderError(FerretError):
    """A search or fetch provider call failed. Reported back to the model."""


class SearchError(ToolProviderError):
    pass


class FetchError(ToolProviderError):
    pass


class ValidationError(FerretError):
    """Rejected request input (empty message, bad session id)."""
