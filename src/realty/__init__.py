"""
Realty listing marketplace backend.
"""
