"""PostgreSQL connection, pool and schema helpers."""
