"""Email composition (EmailService) and delivery backends (senders)."""
