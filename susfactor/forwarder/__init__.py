"""Outbound alert delivery."""
