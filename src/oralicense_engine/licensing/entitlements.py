"""License entitlement inherited by standby databases from their primary."""

from typing import Mapping

from oralicense_engine.hosts.schemas import DatabaseRecord, LicenseEntry


def resolve_core_factor(
    technology: str,
    core_factors: Mapping[str, float],
    default: float = 1.0,
) -> float:
    """Look up the core factor of a hardware abstraction technology.

    The table is operator configuration; unknown technologies get ``default``.
    """
    return core_factors.get(technology, default)


def compute_inherited_licenses(
    primary_licenses: list[LicenseEntry],
    host_core_count: int,
    core_factor: float,
) -> dict[str, float]:
    """
    Compute the license counts a standby database inherits from its primary.

    Every primary license in use (count > 0) maps to
    ``host_core_count * core_factor``; unused ones are not propagated.
    """
    count = host_core_count * core_factor
    return {lic.name: count for lic in primary_licenses if lic.count > 0}


def apply_inherited_licenses(
    secondary: DatabaseRecord,
    computed: Mapping[str, float],
    type_ids: Mapping[str, str | None] | None = None,
) -> None:
    """Overwrite or append computed counts on the standby; never removes entries."""
    type_ids = type_ids or {}
    existing = {lic.name: lic for lic in secondary.licenses}

    for name, count in computed.items():
        lic = existing.get(name)
        if lic is not None:
            lic.count = count
            continue
        lic = LicenseEntry(name=name, count=count, license_type_id=type_ids.get(name))
        secondary.licenses.append(lic)
        existing[name] = lic
