"""
Admin module - Account review for platform administrators.
"""
