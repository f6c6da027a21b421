"""
FastAPI REST API for the Book Resource Service.

This module provides a small REST API for:
- Listing books with author filtering and pagination
- Creating, replacing, updating and deleting books
- Bearer token protection of mutating routes
"""
