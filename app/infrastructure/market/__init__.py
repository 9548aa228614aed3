"""
Infrastructure adapters for the market bounded context.

Each adapter implements a domain port (ABC) on top of SQLAlchemy
Core tables; the unit of work binds them to one transaction.
"""
