"""Command line interface for rfcsections."""
