"""
algen test suite.
"""
