from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CartAddRequest(BaseModel):
    """Body of the add-to-cart calls (persistent and Redis carts)."""

    product: Optional[Union[str, int]] = Field(None, description="Product id or slug")
    variation_id: Optional[Union[str, int]] = Field(None, description="Variation uuid")
    quantity: Optional[int] = Field(1, ge=1, description="Number of packs to add")


class CartUpdateRequest(BaseModel):
    quantity: Optional[int] = Field(None, description="New quantity for the cart line")


class PhoneNumberInput(BaseModel):
    phone: Optional[str] = None


class SavedAddressInput(BaseModel):
    address: Optional[str] = None


class UserDetailsUpdateRequest(BaseModel):
    """Profile form submitted from the account page."""

    model_config = ConfigDict(populate_by_name=True)

    full_name: Optional[str] = Field(None, alias="fullName")
    phone_numbers: List[PhoneNumberInput] = Field(default_factory=list, alias="phoneNumbers")
    saved_addresses: List[SavedAddressInput] = Field(default_factory=list, alias="savedAddresses")
    profile_image_id: Optional[Union[str, int]] = Field(None, alias="profileImageId")


class PostcodeUpsertRequest(BaseModel):
    postcode: Optional[str] = None
    economy: Optional[float] = Field(None, ge=0)
    premium: Optional[float] = Field(None, ge=0)


class PostcodeUpdateRequest(BaseModel):
    economy: Optional[float] = Field(None, ge=0)
    premium: Optional[float] = Field(None, ge=0)
