"""Output renderers — rich terminal views and JSON."""
