"""Fast-forward local branches to their upstream without ever rewriting history."""
