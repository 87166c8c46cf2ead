"""Endpoint modules for the dealer directory and catalog inventory APIs.

Internal to lotfinder and may change at any time.
"""
