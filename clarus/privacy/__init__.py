"""
Privacy request verification: TTL cache, codes and rate limiting.
"""
