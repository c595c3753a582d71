"""
Geoturismo Backend — ORM Models
=================================

Importing this package registers every table on `Base.metadata`
(Alembic autogenerate and `Database.create_all` rely on it).
"""

from geoturismo.models.categoria import Categoria
from geoturismo.models.punto import PuntoInteres
from geoturismo.models.usuario import Usuario
from geoturismo.models.evento import Evento
from geoturismo.models.ruta import Ruta, RutaPunto

__all__ = [
    "Categoria",
    "PuntoInteres",
    "Usuario",
    "Evento",
    "Ruta",
    "RutaPunto",
]
