"""Packaged Jinja2 prompt templates."""
