"""Combat event sources."""
