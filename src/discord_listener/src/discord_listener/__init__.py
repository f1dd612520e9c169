"""Discord transport for the action code signing bot."""
