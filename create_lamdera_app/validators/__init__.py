"""Validation of command line input before anything touches the filesystem."""
