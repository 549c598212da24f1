"""Lead-capture quote pricing service."""
