"""
Blog API Backend — Services Layer
===================================

What:  Business logic between routes (HTTP) and the database (persistence).

Service Inventory:
    - PostService: validation and CRUD statements for blog posts

Services take an AsyncSession per call and hold no per-request state, so
they can be unit-tested with a mock session.
"""
