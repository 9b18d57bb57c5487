"""
Data models for Clarus Vitae.

- ReviewRecord: approved review input to aggregation
- ComparisonItem / ComparisonList: session comparison state
- PropertyRecord: property data for comparison exports
"""
