"""
Test suite for formula-numerics

Contains:
- tests/unit/          : Unit tests for individual modules
"""
