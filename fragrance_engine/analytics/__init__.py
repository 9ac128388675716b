"""
Usage analytics.

Responsibilities:
- Keep an in-memory log of recommendation requests and interactions.
- Summarise request volume, latency, fallback rate and preference trends.
"""
