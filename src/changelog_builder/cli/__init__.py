"""Command-line interface for changelog-builder."""
