"""Command-line interface for asset-manager."""
