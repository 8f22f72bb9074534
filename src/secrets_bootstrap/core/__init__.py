"""Core building blocks: references, secrets backends, sources, and outputs."""
