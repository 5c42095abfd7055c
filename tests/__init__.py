"""
TickerFeed Test Suite

Test Categories:
- unit/: Fast, isolated unit tests
- integration/: HTTP endpoint tests against an in-memory database
- fixtures/: Shared factories for content, weather, election and closing rows
"""
