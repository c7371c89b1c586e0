"""Core pipeline: unwrap, parse, verify, download and install."""
