"""
Test suite for the todo client.

This package contains:
- unit/: controller, API client, store and token helpers in isolation
- integration/: Flask views driven through the test client
- contracts/: consumer assertions against the Todo API OpenAPI document
- security/: cookie hardening and output encoding
"""
