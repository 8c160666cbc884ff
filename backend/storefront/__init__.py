"""
Storefront backend: catalog and account lifecycle on top of ``shared``.

- storefront.models: SQLAlchemy models with soft-delete tombstones
- storefront.repositories: queries, pagination and the soft-delete lifecycle
- storefront.services: authorization gate and domain services
"""
