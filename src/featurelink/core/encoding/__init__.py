"""Encoders for recorded report requests."""
