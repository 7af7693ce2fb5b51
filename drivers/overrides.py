"""
Typed driver overrides.

Overrides arrive at the boundary as {driver_name: number}. They are parsed into
DriverOverrides, which has one optional field per known driver and rejects
anything else, so a typo ("churn_rte") fails loudly instead of being ignored.
Values must be real numbers: booleans and numeric strings are rejected.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, StrictFloat, ValidationError

from core.errors import DriverValidationError


class DriverOverrides(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    # Revenue
    subscription_revenue: Optional[List[StrictFloat]] = None
    advertising_revenue: Optional[List[StrictFloat]] = None
    fill_rate: Optional[StrictFloat] = None
    cpm: Optional[StrictFloat] = None
    impressions: Optional[List[StrictFloat]] = None
    growth_rate: Optional[StrictFloat] = None
    churn_rate: Optional[StrictFloat] = None
    arpu: Optional[StrictFloat] = None
    pricing_sensitivity: Optional[StrictFloat] = None
    adoption_rate: Optional[StrictFloat] = None

    # Cost
    hosting_cost_per_account: Optional[List[StrictFloat]] = None
    bandwidth_multiplier: Optional[StrictFloat] = None
    inference_cost_per_unit: Optional[StrictFloat] = None
    usage_multiplier: Optional[StrictFloat] = None
    payment_processing_fee: Optional[StrictFloat] = None

    # Operating
    base_opex: Optional[List[StrictFloat]] = None
    productivity_multiplier: Optional[StrictFloat] = None
    paid_cac: Optional[StrictFloat] = None
    organic_cac: Optional[StrictFloat] = None
    organic_mix: Optional[StrictFloat] = None
    marketing_budget: Optional[StrictFloat] = None
    efficiency_multiplier: Optional[StrictFloat] = None

    # Capital
    starting_cash: Optional[StrictFloat] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DriverOverrides":
        """Parse a raw override map, converting pydantic errors into DriverValidationError."""
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise DriverValidationError(_format_errors(exc)) from exc

    def as_updates(self) -> Dict[str, Any]:
        """Only the fields the caller actually set."""
        return self.model_dump(exclude_none=True)


def _format_errors(exc: ValidationError) -> List[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        if err.get("type") == "extra_forbidden":
            messages.append(f"{loc}: unknown driver")
        else:
            messages.append(f"{loc}: {err.get('msg')}")
    return messages
