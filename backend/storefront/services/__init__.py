"""
Service Layer.

- base_service: SoftDeleteCRUDService shared by catalog services
- permissions: authorization gate (ActingUser, Action, Resource, authorize)
- domain: UserService, CategoryService, ProductService
"""
