"""
Browser session management for reelcheck.

Provides Playwright-based session handling with:
- One isolated browser session per test worker
- Strict reverse-order teardown with optional trace capture
- Failure screenshots attached to a shared report sink
"""
