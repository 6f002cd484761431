"""License type catalog loaded from a resource file."""

import json
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from oralicense_engine.licensing.schemas import LicenseTypeCatalogEntry

logger = logging.getLogger(__name__)

_CATALOG = TypeAdapter(list[LicenseTypeCatalogEntry])


def load_license_types(path: str) -> list[LicenseTypeCatalogEntry]:
    """Read the catalog from a JSON file.

    A missing or unconfigured file yields an empty catalog; an unreadable
    or undecodable one is logged and also yields an empty catalog.
    """
    if not path:
        return []

    file = Path(path)
    if not file.exists():
        logger.warning("No license types file at %s, no license types set", path)
        return []

    try:
        return _CATALOG.validate_python(json.loads(file.read_text(encoding="utf-8")))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error("Unable to load license types from %s: %s", path, e)
        return []


@lru_cache(maxsize=8)
def get_license_types_catalog(path: str) -> tuple[LicenseTypeCatalogEntry, ...]:
    """Catalog for ``path``, read once per process; ``cache_clear()`` reloads."""
    catalog = tuple(load_license_types(path))
    logger.info("Loaded %d license type(s) from %s", len(catalog), path or "<unset>")
    return catalog
