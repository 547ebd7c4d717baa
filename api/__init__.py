"""
HTTP API: audio routes and request authentication.
"""
