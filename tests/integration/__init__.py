"""
Integration tests for the todo client views.

Routes are exercised through the Flask test client with the remote Todo
API replaced by an in-memory fake, demonstrating:
- Authentication and session lifecycle
- Task create/toggle/delete round trips
- Degradation when the API is slow or down
"""
