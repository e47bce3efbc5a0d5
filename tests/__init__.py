"""
Test Suite for the Library Catalog API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_store.py: Entity store reads, writes and validation
- test_security.py: Password hashing and token handling
- test_context.py: Bearer token extraction and current user resolution
- test_graphql.py: Queries and mutations end to end over /graphql
- test_health.py: Health and root endpoints
- test_config.py: Settings validation

Running Tests:
    # Run all tests
    pytest

    # Run with coverage
    pytest --cov=library_api --cov-report=html

    # Run specific file
    pytest tests/test_graphql.py
"""
