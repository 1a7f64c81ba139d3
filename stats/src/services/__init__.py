"""
Service layer for the statistics service.
"""
