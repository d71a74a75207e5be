"""
KilluStats Test Suite
=====================

Test Organization
-----------------
- tests/unit/          : Fast unit tests with mocks (no external dependencies)
- tests/integration/   : Integration tests against real engines (SQLite files
                         via aiosqlite; MySQL via testcontainers when Docker
                         is available)
- tests/factories.py   : Row builders for the external store schemas

Testing Philosophy
------------------
- Unit tests: Fast, isolated, test rules and formatting
- Integration tests: Real SQL against the plugin schemas
- Use pytest markers to categorize and selectively run tests
- Follow AAA pattern: Arrange, Act, Assert
"""
