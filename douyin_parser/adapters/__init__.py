"""Adapters: upstream API client, Discord transport, HTTP preview server."""
