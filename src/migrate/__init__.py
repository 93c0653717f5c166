"""Table migration pipeline.

This module discovers source tables, copies their rows through the
JSON unwrapping transform, and writes them to a fresh destination file.
"""
