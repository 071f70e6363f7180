"""Contact form module."""
