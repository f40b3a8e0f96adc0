"""Interaction contract tests driven by YAML contract files."""
