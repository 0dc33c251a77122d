"""
Lifecell Shared Kernel
======================

Reusable lifecycle-scoped reactive state primitives.

Architecture:
- core: StateCell, LifecycleGate, host lifecycle binding, configuration
- config: packaged YAML settings
"""

__version__ = "0.1.0"

__all__ = []
