"""Reporters for terminal, JSON and YAML output."""
