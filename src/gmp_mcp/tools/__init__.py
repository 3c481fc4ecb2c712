"""Tool handlers backed by Google Maps Platform and the docs service."""
