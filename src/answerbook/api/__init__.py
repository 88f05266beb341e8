"""HTTP hosting surface."""
