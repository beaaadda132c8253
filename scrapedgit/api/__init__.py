"""HTTP payload schemas."""
