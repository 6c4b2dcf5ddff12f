"""Cache ports."""
