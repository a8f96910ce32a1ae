"""Blog backend API package."""
