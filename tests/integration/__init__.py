"""
Integration Tests Package for train composition

This package contains integration tests that verify the service, command
processor and event bus work together correctly.

Integration tests focus on:
1. End-to-end composition scenarios
2. Command processing with rollback
3. Event notifications across layers
"""

TEST_CATEGORIES = {
    "scenarios": "End-to-end composition scenario tests",
    "commands": "Command processor integration tests",
}
