"""Packaged configuration files (search weights and their JSON schemas)."""
