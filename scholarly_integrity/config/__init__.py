"""Configuration: environment settings and validation config loading."""
