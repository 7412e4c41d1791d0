"""Service Layer — orchestrates repositories into task lifecycle operations."""
