# Services package init
"""
Product API: Services Layer
==============================

Service Inventory:
    - ProductStore: validated CRUD over the MongoDB products collection
"""
