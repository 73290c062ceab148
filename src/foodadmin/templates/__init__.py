"""Packaged mapping tables (status codes, synonyms, payment methods)."""
