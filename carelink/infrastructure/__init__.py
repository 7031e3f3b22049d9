"""Infrastructure adapters: persistence, email, realtime delivery, security."""
