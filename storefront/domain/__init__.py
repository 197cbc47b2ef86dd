"""
Domain layer

Entities, value objects, pricing rules and repository interfaces.
"""
