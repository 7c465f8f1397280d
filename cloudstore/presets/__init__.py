"""Bundled configuration presets."""
