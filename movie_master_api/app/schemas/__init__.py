"""Pydantic schemas and document helpers for API payloads."""
