"""HTTP API for driving tag simulations from a browser or script."""
