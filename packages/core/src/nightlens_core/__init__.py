"""Nightly build incident statistics: calculator, refresh schedule and cache policy."""
