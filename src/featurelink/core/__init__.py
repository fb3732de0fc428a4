"""Core domain: feature tree models, tracking and formatting."""
