"""
Studio Kernel

Shared foundation for the studio-operations workflow:
- Typed transition records and an immutable per-kind transition registry
- Structured JSON logging with request-scoped context
- Typed exceptions with machine-readable codes
- SQLAlchemy base classes and session management
"""

__version__ = "0.1.0"
