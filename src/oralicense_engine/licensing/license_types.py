"""License type ordering and alias resolution."""

from typing import Mapping, Sequence

from oralicense_engine.hosts.schemas import DatabaseRecord
from oralicense_engine.licensing.schemas import LicenseTypeCatalogEntry


def metric_priorities(
    environment: str,
    metrics_by_environment: Mapping[str, Sequence[str]],
    default_metrics: Sequence[str],
) -> dict[str, int]:
    """
    Map each metric to its priority rank for an environment.

    Earlier metrics rank higher: rank = len(order) - index. Environments
    without an explicit order use ``default_metrics``.
    """
    order = metrics_by_environment.get(environment)
    if order is None:
        order = default_metrics
    ranks: dict[str, int] = {}
    for index, metric in enumerate(order):
        ranks.setdefault(metric, len(order) - index)
    return ranks


def rank_license_types(
    catalog: Sequence[LicenseTypeCatalogEntry],
    environment: str,
    metrics_by_environment: Mapping[str, Sequence[str]],
    default_metrics: Sequence[str],
) -> list[LicenseTypeCatalogEntry]:
    """Sort the catalog by metric priority, highest first.

    Metrics missing from the order rank 0. Equal ranks keep fetch order.
    """
    ranks = metric_priorities(environment, metrics_by_environment, default_metrics)
    return sorted(catalog, key=lambda lt: ranks.get(lt.metric, 0), reverse=True)


def assign_license_type_ids(
    catalog: Sequence[LicenseTypeCatalogEntry],
    database: DatabaseRecord,
) -> None:
    """Set license_type_id on each license whose name is an alias in the catalog.

    Matching is exact and case-sensitive; the first catalog entry wins.
    Unmatched licenses are left as they are.
    """
    for lic in database.licenses:
        for license_type in catalog:
            if lic.name in license_type.aliases:
                lic.license_type_id = license_type.id
                break
