"""SQLModel database models for hostshare."""

from hostshare.models.hosts import Host, HostBase
from hostshare.models.shares import FolderShare, FolderShareBase, HostShare, HostShareBase
from hostshare.models.users import User, UserBase

__all__ = [
    "FolderShare",
    "FolderShareBase",
    "Host",
    "HostBase",
    "HostShare",
    "HostShareBase",
    "User",
    "UserBase",
]
