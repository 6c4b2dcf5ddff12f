"""Configuration property classes."""
