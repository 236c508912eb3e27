"""Core configuration, enums, schemas and directive tables."""
