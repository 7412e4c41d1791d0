"""Schemas — immutable value objects exchanged with callers."""
