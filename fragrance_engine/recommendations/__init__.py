"""
Fragrance ranking engine.

Responsibilities:
- Score the catalog against a preference query (rules or a trained model).
- Boost candidates using signals from users with similar preferences.
- Blend confidence, compose explanations, sort and truncate.
- Degrade to a popularity-ranked list when anything in the pipeline fails.
"""
