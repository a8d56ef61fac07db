"""Option storage backends."""
