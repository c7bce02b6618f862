"""Core shared modules.

This package holds settings, errors, logging, typed models and the
capability contracts used by every other layer.
"""
