"""Security: audit trail of system events."""
