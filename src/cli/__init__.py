"""Command-line interface for inspecting and editing config files."""
