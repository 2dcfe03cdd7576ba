"""Configuration loading (YAML, .env, environment variables)."""
