"""Config, logging and small helpers."""
