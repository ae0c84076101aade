"""Configuration and shared types."""
