"""
User management backend.

Modules are organised into config, database, crud, services and routers.  The
environment is validated by :func:`load_environment` before anything else is
initialised.
"""

from .config import EnvironmentVariables, load_environment
from .exceptions import ConfigurationError

__all__ = ["ConfigurationError", "EnvironmentVariables", "load_environment"]
