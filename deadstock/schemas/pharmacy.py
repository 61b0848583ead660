from typing import Optional

from pydantic import BaseModel, Field


class PharmacyProfile(BaseModel):
    id: str = ""
    name: str = ""
    phone: str = ""
    city: str = ""
    address: str = ""
    license_no: str = ""
    email: str = ""
    telegram_id: str = ""
    profile_pic: Optional[str] = None


class ProfileFields(BaseModel):
    name: str = ""
    phone: str = ""
    city: str = ""
    address: str = ""
    license_no: str = ""
    telegram_id: str = ""
    profile_pic: Optional[str] = None


class Credentials(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class ProfileCompletion(ProfileFields):
    email: str = ""
