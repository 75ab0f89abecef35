"""
Services for the place-info cache and its collaborators
"""

from . import db
from . import place_info_service
from . import place_source

__all__ = [
	"db",
	"place_info_service",
	"place_source",
]
