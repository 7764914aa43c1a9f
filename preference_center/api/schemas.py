# preference_center/api/schemas.py
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, field_validator

DEFAULT_TITLE = "Email Preferences"
DEFAULT_SUBTITLE = "Manage your email subscription preferences below."


class Customer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: Optional[str] = None
    globally_unsubscribed: bool = Field(False, alias="globallyUnsubscribed")


class Header(BaseModel):
    title: str = DEFAULT_TITLE
    subtitle: str = DEFAULT_SUBTITLE


class Topic(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    subscribed: bool = False


class Preferences(BaseModel):
    header: Header = Field(default_factory=Header)
    topics: List[Topic] = Field(default_factory=list)


class PreferencesView(BaseModel):
    """What the preferences form renders: who the customer is and their topics."""

    customer: Customer
    preferences: Preferences

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class TopicUpdate(BaseModel):
    id: StrictInt
    subscribed: StrictBool

    @field_validator("id", mode="before")
    @classmethod
    def integral_number(cls, value):
        # JSON has a single number type: 2.0 is the id 2, while 2.5 and "2" stay invalid
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value



class UpdateRequest(BaseModel):
    """
    Payload the form submits. Ids and flags are strict so that strings like
    "1" or "true" are rejected instead of coerced.
    """

    model_config = ConfigDict(populate_by_name=True)

    globally_unsubscribed: StrictBool = Field(False, alias="globallyUnsubscribed")
    topics: List[TopicUpdate]

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class UpdateResponse(BaseModel):
    success: bool
    message: str


class ErrorResponse(BaseModel):
    error: str
    success: Optional[bool] = None
