from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class Quote(BaseModel):
    """Quote of the day attached to an account."""
    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(default="", alias="quote")
    served_by: str = Field(default="", alias="ipAddress")
    language: str = ""


class Account(BaseModel):
    """Account record as it travels over HTTP and the message bus."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str = ""
    served_by: str = Field(default="", alias="servedBy")
    quote: Quote = Field(default_factory=Quote)
    image_url: str = Field(default="", alias="imageUrl")

    def to_dict(self) -> Dict[str, Any]:
        """Convert the account to its transport dictionary."""
        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        """Serialize the account to its transport JSON."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        """Create an Account from a transport dictionary."""
        return cls.model_validate(data)

    @classmethod
    def from_json(cls, data: str | bytes) -> 'Account':
        """Create an Account from transport JSON."""
        return cls.model_validate_json(data)
