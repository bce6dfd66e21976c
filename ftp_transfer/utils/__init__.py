"""Utility module for the FTP transfer helpers.

- Logging: Configured logging with credential redaction
"""
