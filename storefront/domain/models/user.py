from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CurrentUser(BaseModel):
    """Authenticated user resolved from the bearer token."""

    id: str
    username: Optional[str] = None
    email: Optional[str] = None


class PhoneNumber(BaseModel):
    phone: str


class SavedAddress(BaseModel):
    address: str


class ProfileImage(BaseModel):
    id: str
    url: str


class UserDetails(BaseModel):
    """Profile details kept alongside the user account."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str
    full_name: Optional[str] = Field(None, alias="fullName")
    phone_numbers: List[PhoneNumber] = Field(default_factory=list, alias="phoneNumbers")
    saved_addresses: List[SavedAddress] = Field(default_factory=list, alias="savedAddresses")
    profile_image: Optional[ProfileImage] = Field(None, alias="profileImage")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude={"user_id"})
