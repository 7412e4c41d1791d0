"""Core Layer — pure domain logic with no database or framework imports.

Invariants:
    - core/ never imports from infrastructure/, repositories/ or services/
    - Functions here are deterministic given their inputs (clock passed in)
"""
