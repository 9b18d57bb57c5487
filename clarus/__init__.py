"""
Clarus Vitae: review aggregation and property comparison.
"""

__version__ = "1.0.0"
