"""
Auto shop service backend.
"""
