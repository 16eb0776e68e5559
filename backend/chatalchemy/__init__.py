"""ChatAlchemy — chat backend over an in-memory CSV/Excel knowledge base."""
