from pydantic import BaseModel, Field


class URIBase(BaseModel):
    uri: str = Field(..., min_length=1, description="The original URI")


class URICreate(URIBase):
    pass


class ShortURLResponse(URIBase):
    short_url: str = Field(..., description="Alias under the configured prefix")


class PruneRequest(BaseModel):
    before: int = Field(..., ge=0, description="Unix timestamp; older records are removed")


class PruneResponse(BaseModel):
    pruned: bool
