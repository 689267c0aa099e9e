"""
Exception taxonomy.

Recoverable inside a turn (become tool result messages):
- ValidationError: malformed or schema-violating tool arguments
- UnknownToolError: tool name not in the registry
- ExecutorError: a tool's executor failed

Not recoverable inside a turn:
- ExternalServiceError: model, embedding or store call failed; aborts the turn

Startup / programming faults:
- DuplicateToolError, ConfigurationError, TranscriptOrderError
"""


class MemoriaError(Exception):
    """Base class for all package errors."""


class ValidationError(MemoriaError):
    """Tool arguments could not be parsed or violate the tool's schema."""


class UnknownToolError(MemoriaError):
    """Model requested a tool that is not registered."""


class ExecutorError(MemoriaError):
    """A tool executor raised or reported failure."""


class ExternalServiceError(MemoriaError):
    """An external dependency (model, embedding service, store) failed."""

    def __init__(self, service: str, reason: str):
        super().__init__(f"{service} failed: {reason}")
        self.service = service
        self.reason = reason


class DuplicateToolError(MemoriaError):
    """A tool name was registered twice."""


class ConfigurationError(MemoriaError):
    """Invalid configuration detected at startup."""


class TranscriptOrderError(MemoriaError):
    """An append would break tool call / tool result ordering."""
