"""Shared helpers: console output, external commands and user configuration."""
