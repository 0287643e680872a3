"""Entities module with entity-centric structure.

Each entity package keeps its wire model (entity.py), persistence model
(table.py) and data access (repository.py) together. Repositories are
imported from their module directly since they depend on the core services.
"""
