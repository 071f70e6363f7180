"""
Users module - Identity records, role profiles and account variants.
"""
