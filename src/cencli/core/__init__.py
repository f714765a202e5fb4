"""Transport, pagination, and error primitives."""
