"""State persistence and detection history."""
