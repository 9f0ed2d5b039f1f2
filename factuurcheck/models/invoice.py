from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, model_validator

class InvoiceField(BaseModel):
    found: StrictBool
    value: StrictStr | None = None

class AddressField(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    found: StrictBool
    street: StrictStr | None = None
    house_number: StrictStr | None = Field(default=None, alias="houseNumber")
    postal_code: StrictStr | None = Field(default=None, alias="postalCode")
    city: StrictStr | None = None
    complete: StrictBool

    @model_validator(mode="after")
    def _complete_requires_all_parts(self):
        # A P.O. box or a street without postal code is never a complete address
        self.complete = all([self.street, self.house_number, self.postal_code, self.city])
        return self

ComplianceStatus = Literal["green", "orange", "red"]

class FieldResult(BaseModel):
    name: str
    found: bool
    value: str | None = None

class ComplianceResult(BaseModel):
    status: ComplianceStatus
    fields: list[FieldResult]
