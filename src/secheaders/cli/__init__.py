"""secheaders command-line interface."""
