"""
HTTP clients for the remote job directory and account service.
"""
from core.clients.account_client import AccountClient
from core.clients.http import build_client
from core.clients.jobs_client import JobDirectoryClient

__all__ = [
    "AccountClient",
    "JobDirectoryClient",
    "build_client",
]
