"""Standalone expense tracker API backed by SQLAlchemy."""
