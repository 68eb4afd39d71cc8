"""Terminal interface for coursedesk."""
