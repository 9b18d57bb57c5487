"""
Review aggregation for Clarus Vitae.

- review_stats: property page summary and goal achievement rate
- review_aggregation: extended outcome-focused statistics
"""
