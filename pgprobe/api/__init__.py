"""HTTP API exposing the connection probe to the UI layer."""
