"""Command-line interface for timemachine-exclude."""
