"""Core cursor codec, validation and configuration."""
