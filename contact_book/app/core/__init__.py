"""Configuration, logging, database bootstrap and error types."""
