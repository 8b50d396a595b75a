"""
Test suite for wallet numeric core

Contains:
- tests/unit/          : Unit tests for individual modules
"""
