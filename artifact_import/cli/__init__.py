"""Command line interface for artifact_import."""
