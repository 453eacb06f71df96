"""
Test suite for the Doorknob bot.

This package contains tests organized by type:
- Unit tests for individual components
- Architecture tests for package wiring
- Shared fixtures in conftest.py
"""
