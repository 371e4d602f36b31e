"""
Generators package: procedural maze growth.
"""
