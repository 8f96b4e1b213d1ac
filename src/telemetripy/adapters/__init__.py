"""Adapters bridging the core models to the outside world."""
