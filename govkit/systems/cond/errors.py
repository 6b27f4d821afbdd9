"""
govkit -- Condition Engine Errors

Conditions never fail at evaluation time: eval() and signal() are total over
every ballot. The only failure is building a condition with a configuration
that cannot be evaluated meaningfully.
"""

from __future__ import annotations


class ConditionConfigError(ValueError):
    """A condition was constructed with an out-of-range threshold or count."""
