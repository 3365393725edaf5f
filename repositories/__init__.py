"""
repositories/ - Data Access Layer
==================================
SQL for the `animal` table. Repositories take the caller's connection,
run one parameterized statement, and return AnimalPosting objects.
"""
