"""
Utility modules for Clarus Vitae.

Cross-cutting concerns:
- Storage: JSON-backed data-fetch boundary for properties and reviews
"""
