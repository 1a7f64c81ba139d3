"""
HTTP clients for services the backend depends on.
"""
