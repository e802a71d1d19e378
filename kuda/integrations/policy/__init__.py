"""Response normalization: raw JSON from either system into contract models."""
