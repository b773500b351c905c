"""
Test factories.
"""
