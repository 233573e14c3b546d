# Routes package init
"""
ParcelTrack Backend — Routes Package
=====================================

Route Inventory:
    - packages.py: /api/packages JSON API (create, list, get, update)
    - pages.py:    GET / and GET /edit/{id} HTML pages
    - health.py:   GET /health

Routes stay thin: read the request, call PackageService, shape the response.
"""
