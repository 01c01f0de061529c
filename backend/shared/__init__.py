"""
Shared module for cross-cutting concerns of the Auto API.

STRUCTURE:
- shared.security: Authentication, authorization
  - auth.py: JWT verification, current_user_context, require_roles

- shared.infrastructure: Database and request plumbing
  - db.py: SQLAlchemy sessions, safe_commit(), transaction()
  - correlation.py: X-Request-ID middleware and logging filter

- shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging
  - constants.py: Roles, AutoCategory, SafetyFeature, Limits

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Input validation helpers

IMPORT EXAMPLES:
    from shared.security.auth import current_user_context, require_roles
    from shared.infrastructure.db import get_db, transaction
    from shared.config.settings import settings
    from shared.config.constants import Roles, SafetyFeature
    from shared.utils.exceptions import AutoNotFoundError, VersionOutdatedError
"""
