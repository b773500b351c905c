"""
Shared helpers: constants, exceptions, money, dates and logging.
"""
