"""Pluggable key-value stores for the nightlens dashboard cache."""
