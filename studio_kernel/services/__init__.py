"""Kernel service base classes."""
