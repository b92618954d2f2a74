"""
Off-Road Adventures API - Test Suite

Structure:
- unit/: Unit tests for services, rules, notifications and route functions
- integration/: HTTP tests against the FastAPI app on an in-memory database
"""
