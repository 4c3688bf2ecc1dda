"""Exceptions raised by core services."""


class ContractViolation(ValueError):
    """Upstream data is corrupt (content without id, anchor without name)."""


class ContentFetchError(RuntimeError):
    """Content feed could not be fetched or parsed."""
