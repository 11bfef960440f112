"""Command line interface for github-tag."""
