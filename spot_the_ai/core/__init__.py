"""Core gameplay primitives (outbound events).

Kept free of FastAPI concerns so it can be reused by the action dispatcher and tests.
"""
