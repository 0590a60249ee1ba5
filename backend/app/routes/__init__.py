# Routes package init
"""
Product API: Routes Package
==============================

Route Inventory:
    - products.py:  GET/POST /products, GET/PUT/DELETE /products/{id}
    - health.py:    GET /health

Routes stay thin: pull data out of the request, call the ProductStore,
return the result. Error responses are built by the handlers in main.py.
"""
