"""
Fragrance recommendation engine.

Ranks a catalog snapshot against a user's stated and inferred preferences
and returns a bounded, explained, confidence-scored list.
"""
