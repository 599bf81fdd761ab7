"""Transparency portal backend: document catalog, search and administration API."""
