# Models module
from campusvault.models.user import User, UserSession
from campusvault.models.subject import Subject
from campusvault.models.resource import Resource, Download, RESOURCE_TYPES

__all__ = ["User", "UserSession", "Subject", "Resource", "Download", "RESOURCE_TYPES"]
