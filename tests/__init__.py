"""
Lifestyle test suite.

Tests are organized by layer:
    tests/unit/         Unit tests (SQLite in tmp_path, no network)

Run all tests:
    pytest

Run with coverage:
    pytest --cov=lifestyle
"""
