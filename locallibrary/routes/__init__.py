"""
Local Library: Route Handlers
==============================

What:  HTTP handlers that read the request, call a service and render a page.

Route Inventory:
    - catalog.py:         GET /  (redirect), GET /catalog/ (home with counts)
    - authors.py:         /catalog/authors, /catalog/author/...
    - books.py:           /catalog/books, /catalog/book/...
    - book_instances.py:  /catalog/bookinstances, /catalog/bookinstance/...
    - genres.py:          /catalog/genres, /catalog/genre/{id}
    - health.py:          GET /health (JSON)

Routes stay thin: form parsing, one service call, then render or redirect.
Storage and lookup rules live in services/.
"""
