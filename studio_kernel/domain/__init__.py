"""Kernel domain layer -- pure value objects and protocols, zero I/O."""
