"""Exceptions raised while talking to the LLM."""


class InterpretError(Exception):
    """Base exception for a failed LLM interpretation."""


class InterpretTransportError(InterpretError):
    """Raised when the LLM request itself fails (network, auth, rate limit)."""


class InterpretParseError(InterpretError):
    """Raised when the LLM reply carries no parseable JSON payload."""


class InterpretSchemaError(InterpretError):
    """Raised when the LLM reply is JSON but does not match the expected shape."""
