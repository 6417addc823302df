"""
Service layer.

Each service wraps one MongoDB collection and receives the database
handle from its endpoint module, so the handlers stay free of storage
details.
"""
