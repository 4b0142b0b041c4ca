"""
Integration tests for the messagetrace library.

These tests run a publisher decorator and consumer middleware together over
an in-memory broker that copies messages the way a real transport would:
only uuid, payload and metadata cross the boundary.

Run integration tests:
    pytest tests/integration/ -v -m integration
"""
