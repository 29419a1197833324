"""
Service layer.

Each service encapsulates the business rules of one domain.  Services
receive the database connection and the caller from the API layer and
return response envelopes, so they can be used without FastAPI.
"""
