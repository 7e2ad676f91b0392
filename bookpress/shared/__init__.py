"""Shared utilities: logging, errors, ids."""
