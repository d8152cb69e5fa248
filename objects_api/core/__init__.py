"""
Core Module.

Configuration, logging, exceptions and small shared helpers.
"""
