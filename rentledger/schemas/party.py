"""Fields shared by landlord and tenant schemas."""

from pydantic import BaseModel, EmailStr, Field, model_validator


class PartyBase(BaseModel):
    """Identification and contact data of a billing party."""

    name: str | None = Field(default=None, min_length=3, max_length=45)
    surname: str | None = Field(default=None, min_length=3, max_length=45)
    is_company: bool = False
    company_name: str | None = Field(default=None, min_length=3, max_length=45)
    nip: str | None = Field(default=None, pattern=r"^\d{10}$")
    pesel: str | None = Field(default=None, pattern=r"^\d{11}$")
    regon: str | None = Field(default=None, pattern=r"^\d{9}$")
    phone_prefix: str | None = Field(default=None, min_length=4, max_length=4)
    phone_number: str | None = Field(default=None, pattern=r"^\d{9,10}$")
    bank_account: str | None = Field(default=None, pattern=r"^\d{26}$")
    email: EmailStr
    identity_subject: str | None = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def check_company_name(self) -> "PartyBase":
        """Companies must be named, people must have a surname."""
        if self.is_company and not self.company_name:
            raise ValueError("company_name is required for companies")
        if not self.is_company and not self.surname:
            raise ValueError("surname is required for natural persons")
        return self
