"""
Record store backend implementations.
"""
