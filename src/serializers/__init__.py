"""Serialization adapters.

This package encodes typed config values into YAML or JSON documents.
It rebuilds typed values from stored bytes for the config layer.
"""
