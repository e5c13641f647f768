"""Core session primitives (state, phases and diagnostic events).

Kept free of FastAPI concerns so it can be reused by API routes, headless hosts, and tests.
"""
