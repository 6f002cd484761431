"""Pydantic schemas for the license type catalog."""

from pydantic import BaseModel


class LicenseTypeCatalogEntry(BaseModel):
    id: str
    item_description: str = ""
    metric: str = ""
    aliases: list[str] = []
