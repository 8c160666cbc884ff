"""
Shared module for cross-cutting concerns of the storefront backend.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging and security audit logger
  - constants.py: Page sizes, sort fields, validation limits

- shared.infrastructure: Database
  - db.py: SQLAlchemy engine, sessions, safe_commit()

- shared.security: Password hashing (bcrypt)

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Input validation, LIKE escaping, SSRF prevention
  - schemas.py: Pydantic input/output schemas
  - slug.py: Slug generation

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.utils.exceptions import NotFoundError, ConflictError
"""
