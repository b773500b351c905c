"""
Family finance analytics and liability simulation core.
"""

__version__ = "1.0.0"
