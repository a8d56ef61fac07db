"""Validator kinds and the helper that chains them."""
