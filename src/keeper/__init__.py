"""Config holder layer.

This package owns live config values and their transactional mutation.
It coordinates storage and serializer adapters on load and save.
"""
