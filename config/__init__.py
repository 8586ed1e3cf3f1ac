"""
Configuration for the governance monitor.

- settings_loader: raw base.yaml access with dot-path lookups
- settings_schema: pydantic-validated settings with environment overrides
"""
