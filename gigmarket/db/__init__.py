"""Database models, enums and session plumbing."""
