"""Vendor summary model used by the multi-vendor overview."""

from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class VendorSummary(BaseModel):
    """Vendor identity as listed by the admin vendor endpoint."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    vendor_id: Union[int, str] = Field(
        validation_alias=AliasChoices("vendor_id", "vendorId", "id"),
    )
    name: Optional[str] = None
    email: Optional[str] = None
