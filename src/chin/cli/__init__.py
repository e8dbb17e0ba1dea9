"""Command line interface for CHIN."""
