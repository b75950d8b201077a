"""
Database package for the metadata catalog.

This package contains the SQLAlchemy base, the catalog models and the
engine/session helpers.
"""
