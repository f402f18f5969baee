"""
Core utility functions for the Krypton backend.
"""
