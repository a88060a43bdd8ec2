"""External collaborators: filesystem, git and editor backends."""
