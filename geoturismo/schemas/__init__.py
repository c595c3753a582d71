"""
Geoturismo Backend — API Contracts
====================================

Pydantic models for request bodies and response payloads. Kept separate
from the ORM models so the API controls exactly which columns are exposed
(password hashes never are).
"""
