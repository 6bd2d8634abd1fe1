"""
Notes API — Routes Package
============================

Route Inventory:
    - notes.py:   POST /notes, GET /notes, GET/PUT/DELETE /notes/{id}
    - health.py:  GET  /health
"""
