"""Database access layer.

This module opens source and destination SQLite files and quotes
identifiers for the migration pipeline.
"""
