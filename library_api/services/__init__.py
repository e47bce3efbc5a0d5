"""
Services Package

This package contains business logic that is:
- Separate from GraphQL handling (resolvers)
- Reusable from scripts and tests
- Easier to test in isolation

Current services:
- security.py: Password hashing and JWT utilities (credential service)
- store.py: Entity store over the Book, Author and User collections
- rate_limiter.py: Per-client request limits with slowapi
"""
