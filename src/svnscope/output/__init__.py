"""Output renderers: rich terminal tables and JSON."""
