from pydantic import BaseModel
from typing import Optional

class MovieSummary(BaseModel):
    """Display metadata copied onto activity records at write time"""
    title: Optional[str] = None
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
