"""
Testing package for the Sequence Builder API.

This package contains:
- Unit tests for the sequence graph engine
- Integration tests for API endpoints
- Test fixtures and sample graphs
"""
