"""Command-line interface for svcstat."""
