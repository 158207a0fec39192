"""Command line entry points for pairrank."""
