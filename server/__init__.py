"""HTTP server exposing contract flow extraction."""
