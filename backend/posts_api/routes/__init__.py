# Routes package init
"""
Posts & Comments API — Routes Package
=======================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - health.py:     GET /, GET /health
    - posts.py:      /post, /post/{id}        (built around a ResourceController)
    - comments.py:   /comment, /comment/{id}  (built around a ResourceController)
    - resources.py:  shared CRUD router builder used by posts.py and comments.py

Routes are THIN: they extract query/path/body data, call the controller, and
return its result. Failure status codes are decided by the controller.
"""
