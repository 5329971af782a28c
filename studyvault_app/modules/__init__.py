"""Feature modules, each a Flask blueprint."""
