"""Command line interface for create-lamdera-app."""
