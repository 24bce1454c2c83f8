"""
Test suite for ratnum

Contains:
- tests/unit/          : Unit tests for individual modules
"""
