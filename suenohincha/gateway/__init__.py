"""Backend gateways: the abstract interface and its HTTP and SQL implementations."""

from .base import BackendGateway
from .rest import RestGateway
from .sql import SqlGateway

__all__ = ["BackendGateway", "RestGateway", "SqlGateway"]
