"""
db/ - Database Layer
====================
PostgreSQL connection pool and schema initialization for the `animal` table.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
