"""
Services Package

Business logic kept separate from HTTP handling so it can be tested and
reused without a request.

Current services:
- auth.py: Registration and login
- catalog.py: Open Library search proxy and landing-page showcase
- favorites.py: Per-user favorite books
- security.py: Password hashing and JWT utilities
"""
