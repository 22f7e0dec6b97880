"""Game domain and infrastructure packages."""
