"""Host adapters: project model and repository status subscriptions."""

from php_integrator.host.project import HostProject, Project, load_project
from php_integrator.host.repository import (
    RepositorySubscription,
    RepositoryWatcher,
    discover_git_dir,
)

__all__ = [
    "HostProject",
    "Project",
    "RepositorySubscription",
    "RepositoryWatcher",
    "discover_git_dir",
    "load_project",
]
