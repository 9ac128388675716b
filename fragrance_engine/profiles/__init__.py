"""
User profile package.

Responsibilities:
- Define preference queries, interactions and purchases.
- Own the bounded in-memory profile store with per-user locking.
- Derive profile insights (favourite notes, intensity, seasons).
"""
