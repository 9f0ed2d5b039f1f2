"""
Compliance scoring for extracted invoice fields.

Turns the 14 extracted fields into found/not-found results and a traffic-light
status: green when nothing is missing, orange for one or two gaps, red for
three or more.
"""

from loguru import logger

from ..models.fields import FIELD_REGISTRY, ExtractedFields
from ..models.invoice import AddressField, ComplianceResult, ComplianceStatus, FieldResult

# Highest number of missing fields that still yields orange
ORANGE_MAX_MISSING = 2


def format_address(address: AddressField) -> str | None:
    """
    Render an address as "{street} {houseNumber}, {postalCode} {city}".

    Absent parts are left out; with no parts at all the result is None. A
    house number is only shown next to a street.
    """
    street_part = address.street
    if address.street and address.house_number:
        street_part = f"{address.street} {address.house_number}"
    city_part = " ".join(p for p in (address.postal_code, address.city) if p)
    parts = [p for p in (street_part, city_part) if p]
    return ", ".join(parts) if parts else None


def score(missing_count: int) -> ComplianceStatus:
    if missing_count == 0:
        return "green"
    elif missing_count <= ORANGE_MAX_MISSING:
        return "orange"
    else:
        return "red"


def calculate_compliance(fields: ExtractedFields) -> ComplianceResult:
    """
    Map extracted fields to a ComplianceResult.

    Address fields count as found only when complete; simple fields pass
    their found flag and value through. Results keep registry order.
    """
    results = []
    for spec in FIELD_REGISTRY:
        field = getattr(fields, spec.attr)
        if isinstance(field, AddressField):
            results.append(FieldResult(name=spec.key, found=field.complete, value=format_address(field)))
        else:
            results.append(FieldResult(name=spec.key, found=field.found, value=field.value))

    missing = [r.name for r in results if not r.found]
    status = score(len(missing))

    logger.info("Invoice compliance calculated", status=status, missing=missing)

    return ComplianceResult(status=status, fields=results)
