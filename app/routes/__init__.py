# Routes package init
"""
Inventory API - API Routes Package
===================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles a specific resource or action.

Route Inventory:
    - products.py: POST/GET        /api/productos
                   GET/PUT/DELETE  /api/productos/{id}
    - health.py:   GET             /health

Routes handle HTTP concerns only (path/body extraction, status codes) and
delegate everything else to ProductService.
"""
