"""
Geoturismo Backend — Services Layer
=====================================

What:  Business logic between routes (HTTP) and the database.
How:   Each service takes an AsyncSession from the caller, so every write
       of one request shares that request's transaction.

Service Inventory:
    - PuntoService:     points of interest; referential cleanup on delete
    - UsuarioService:   users, bcrypt credentials, login
    - EventoService:    events and their optional point
    - RutaService:      routes, point membership, duration bookkeeping
    - CategoriaService: category labels for points and events
    - duration:         pure walking-time estimator
    - updates:          allow-listed partial UPDATE builder
"""
