"""Command-line interface for nostr-identity."""
