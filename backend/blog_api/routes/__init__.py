"""
Blog API Backend — API Routes Package
=======================================

Route Inventory:
    - posts.py:   GET    /api/posts
                  GET    /api/posts/{id}
                  POST   /api/posts
                  PUT    /api/posts/{id}
                  DELETE /api/posts/{id}
    - health.py:  GET    /health

Routes stay THIN: pull data from the request, call PostService, return the
schema. Status-code mapping for errors lives in main.py.
"""
