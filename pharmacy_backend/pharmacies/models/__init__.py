# pharmacies/models/__init__.py

from pharmacies.models.pharmacy import Pharmacy

__all__ = ["Pharmacy"]
