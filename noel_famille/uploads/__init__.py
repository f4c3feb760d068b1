"""Uploaded image handling: WebP conversion and the /uploads/ folder."""
