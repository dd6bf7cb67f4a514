"""CLI command groups.

The root group lives in atomlineage.cli; command groups are imported directly.
"""
