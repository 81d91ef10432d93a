"""Command-line tools for Tourbridge."""
