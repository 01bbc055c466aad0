"""
Routes package for the todo client.

This package contains route blueprints:
- views: HTML page routes for login, registration and the task list
"""
