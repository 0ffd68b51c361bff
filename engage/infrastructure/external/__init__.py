"""External collaborators: email and webhooks."""
