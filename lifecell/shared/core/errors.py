"""Exception hierarchy for Lifecell."""

from __future__ import annotations


class LifecellError(Exception):
    """Base class for all Lifecell errors."""


class GateClosedError(LifecellError):
    """Raised when a destroyed LifecycleGate is asked to activate again.

    Resubscribing after the host is gone is a programming defect, so this is
    always surfaced to the caller.
    """

    def __init__(self, gate_name: str):
        super().__init__(f"LifecycleGate '{gate_name}' is destroyed and cannot be reactivated")
        self.gate_name = gate_name


class ConfigurationError(LifecellError):
    """Raised when merged configuration fails strict validation."""
