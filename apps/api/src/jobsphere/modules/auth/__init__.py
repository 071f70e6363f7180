"""Authentication: registration, email verification and login."""
