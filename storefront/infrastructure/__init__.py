"""Infrastructure layer: persistence, email, security and realtime delivery."""
