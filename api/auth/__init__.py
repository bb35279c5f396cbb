"""
Cookie-based session authentication and ownership checks.
"""
