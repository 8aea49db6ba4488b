from pydantic import BaseModel, Field, ConfigDict


class LinkBase(BaseModel):
    slug: str = Field(..., min_length=1, description="Short identifier, case-sensitive")


class LinkCreate(LinkBase):
    """Form payload of /api/add. URLs are stored as given, without validation."""
    url: str = Field(..., min_length=1, description="Destination URL")


class LinkDelete(LinkBase):
    pass


class LinkResponse(LinkBase):
    """One entry of the /api/list response"""
    url: str

    # Pydantic V2 style configuration
    model_config = ConfigDict(from_attributes=True)
