"""
Stat resolver for the character sheet core.

Turns raw character inputs (scores, level, class, skill tiers, equipment)
into every derived value shown on the sheet.
"""

from charsheet.resolver.stat_resolver import (
    UNARMED_STRIKE,
    ResolverConfig,
    StatResolver,
    recalculate,
    sanitize_record,
)

__all__ = [
    "UNARMED_STRIKE",
    "ResolverConfig",
    "StatResolver",
    "recalculate",
    "sanitize_record",
]
