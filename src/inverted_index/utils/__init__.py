"""Helpers for retrieving document collections."""
