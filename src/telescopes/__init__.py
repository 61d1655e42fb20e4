"""
Procedural layout of nested, telescoping shell structures.
"""
