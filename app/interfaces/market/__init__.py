"""
HTTP interface of the market bounded context.

One router per resource (users, trade posts, neighbor posts), sharing
schemas and dependency providers.
"""
