"""Adapters for external collaborators: trust service, docker, tools."""
