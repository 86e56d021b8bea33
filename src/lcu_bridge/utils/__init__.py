"""Shared utilities for lcu-bridge."""
