"""
Feature modules.

Importing this package registers every ORM model with the declarative
base so string-based relationships resolve regardless of which module a
caller imports first.
"""

from jobsphere.modules.applications import models as _applications_models  # noqa: F401
from jobsphere.modules.jobs import models as _jobs_models  # noqa: F401
from jobsphere.modules.users import models as _users_models  # noqa: F401
