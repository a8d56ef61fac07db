"""Option namespace reports."""
