"""HTTP primitives: immutable request, chainable responses."""
