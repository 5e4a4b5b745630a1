"""Command-line interface for the Replicate client."""
