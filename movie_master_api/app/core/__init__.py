"""Configuration, logging, errors, database and security helpers."""
