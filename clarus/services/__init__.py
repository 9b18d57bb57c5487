"""
Service layer combining data access with review computations.
"""
