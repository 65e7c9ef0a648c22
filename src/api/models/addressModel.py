from typing import TYPE_CHECKING, Optional
from pydantic import Field as PydanticField
from sqlmodel import Field, Relationship

from src.api.models.baseModel import ApiSchema, TimeStampedModel, TimeStampReadModel

if TYPE_CHECKING:
    from src.api.models import User


class Address(TimeStampedModel, table=True):
    __tablename__ = "addresses"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    full_name: str = Field(max_length=191)
    phone: str = Field(max_length=30)
    street: str
    city: str = Field(max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    postal_code: Optional[str] = Field(default=None, max_length=20)
    country: str = Field(default="Vietnam", max_length=100)
    is_default: bool = Field(default=False)

    user: Optional["User"] = Relationship(back_populates="addresses")

    def snapshot(self) -> dict:
        """Copy stored on the order, survives later edits of the address"""
        return {
            "id": self.id,
            "fullName": self.full_name,
            "phone": self.phone,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "postalCode": self.postal_code,
            "country": self.country,
        }


class AddressCreate(ApiSchema):
    full_name: str = PydanticField(min_length=1, max_length=191)
    phone: str = PydanticField(min_length=8, max_length=30)
    street: str = PydanticField(min_length=1)
    city: str = PydanticField(min_length=1, max_length=100)
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: str = "Vietnam"
    is_default: bool = False


class AddressUpdate(ApiSchema):
    full_name: Optional[str] = PydanticField(default=None, min_length=1, max_length=191)
    phone: Optional[str] = PydanticField(default=None, min_length=8, max_length=30)
    street: Optional[str] = PydanticField(default=None, min_length=1)
    city: Optional[str] = PydanticField(default=None, min_length=1, max_length=100)
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    is_default: Optional[bool] = None


class AddressRead(TimeStampReadModel):
    id: int
    full_name: str
    phone: str
    street: str
    city: str
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: str
    is_default: bool
