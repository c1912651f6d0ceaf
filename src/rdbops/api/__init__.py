"""HTTP surface exposing analysis results as JSON."""
