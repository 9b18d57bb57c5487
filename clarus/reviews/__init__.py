"""
Review listing: query parsing, sorting and pagination.
"""
