"""
Singers API — API Routes Package
==================================

Route Inventory:
    - health.py:             GET /  and  GET /health
    - singers.py:            singer CRUD, embedded band members
    - singers_relational.py: singer CRUD, band members joined from instruments
    - instruments.py:        POST /instrument, GET /instruments

Exactly one of the two singer routers is mounted, chosen by SINGER_MODEL.
Routes stay thin: convert the path id, validate the body, await one service
call, shape the response.
"""
