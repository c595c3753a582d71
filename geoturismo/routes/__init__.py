"""
Geoturismo Backend — API Routes Package
=========================================

Route Inventory:
    - puntos.py:      /puntos       points of interest
    - usuarios.py:    /usuarios     users, login, password change
    - eventos.py:     /eventos      events (with their point embedded)
    - rutas.py:       /rutas        routes, their points and durations
    - categorias.py:  /categorias   category labels for points and events
    - health.py:      /health       service health check

Routes are thin: they extract request data, call a service, and shape the
response. Business rules live in geoturismo.services.
"""
