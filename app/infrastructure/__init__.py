"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer: SQL repositories, the unit of work,
and password hashing.
"""
