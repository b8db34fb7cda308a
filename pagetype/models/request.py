from typing import Optional

from pydantic import BaseModel, Field, HttpUrl


class ClassifyRequest(BaseModel):
    url: HttpUrl
    html: Optional[str] = Field(
        default=None,
        description="Raw page HTML.  When omitted the service fetches the URL itself.",
    )
    parallel: bool = Field(
        default=False,
        description="Run the six extractor passes concurrently.",
    )
