"""Process-level glue: configuration and logging setup."""
