"""
Core utilities shared across recordkeeper.

This package hosts configuration (environment-backed Settings), the logging
bootstrap and the error hierarchy raised by repositories and services.
"""
