"""
Catalog snapshot package.

Responsibilities:
- Define the immutable CatalogItem schema.
- Load the fragrance catalog once and serve it read-only to the engine.
"""
