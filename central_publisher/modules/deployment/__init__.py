"""Deployment module: Publisher API client, local store and lifecycle."""
