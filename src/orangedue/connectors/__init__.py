"""Front-end connectors (console REPL and console notifier)."""
