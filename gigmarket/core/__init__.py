"""Core utilities: config, auth, errors, logging, presence."""
