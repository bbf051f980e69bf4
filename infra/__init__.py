"""Project infrastructure: filesystem paths and logging."""
