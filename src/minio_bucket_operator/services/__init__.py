"""Storage backends managed by the operator."""
