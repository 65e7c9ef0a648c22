from typing import TYPE_CHECKING, List, Optional
from enum import Enum
from pydantic import EmailStr, Field as PydanticField
from sqlmodel import Field, Relationship

from src.api.models.baseModel import ApiSchema, TimeStampedModel, TimeStampReadModel

if TYPE_CHECKING:
    from src.api.models import Address, Order, Review, Wishlist, Cart


class UserRole(str, Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


class User(TimeStampedModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=191)
    email: str = Field(max_length=191, index=True, unique=True)
    password: str
    role: UserRole = Field(default=UserRole.CUSTOMER)
    phone: Optional[str] = Field(default=None, max_length=30)
    image: Optional[str] = None
    is_active: bool = Field(default=True)

    # relationships
    addresses: List["Address"] = Relationship(back_populates="user")
    orders: List["Order"] = Relationship(back_populates="user")
    reviews: List["Review"] = Relationship(back_populates="user")
    wishlists: List["Wishlist"] = Relationship(back_populates="user")
    cart: Optional["Cart"] = Relationship(back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


# --------------------------------------------------------------------
# AUTH SCHEMAS
# --------------------------------------------------------------------
class RegisterForm(ApiSchema):
    name: str = PydanticField(min_length=2, max_length=191)
    email: EmailStr
    password: str = PydanticField(min_length=6)
    phone: Optional[str] = None


class SignInForm(ApiSchema):
    email: EmailStr
    password: str = PydanticField(min_length=1)


class ForgotPasswordForm(ApiSchema):
    email: EmailStr


class ResetPasswordForm(ApiSchema):
    token: str
    password: str = PydanticField(min_length=6)


class ChangePasswordForm(ApiSchema):
    current_password: str
    new_password: str = PydanticField(min_length=6)


class ProfileUpdate(ApiSchema):
    name: Optional[str] = PydanticField(default=None, min_length=2, max_length=191)
    phone: Optional[str] = None
    image: Optional[str] = None


class UserRead(TimeStampReadModel):
    id: int
    name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    image: Optional[str] = None
    is_active: bool
