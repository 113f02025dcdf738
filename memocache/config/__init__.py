"""Cache configuration models (file and environment)."""
