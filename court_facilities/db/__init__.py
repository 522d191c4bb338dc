"""
PostgreSQL access layer.
"""
