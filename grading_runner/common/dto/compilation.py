from pathlib import Path
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field


class CompilationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    transcript: str = ""
    output_dir: Optional[Path] = None
    source_files: List[Path] = Field(default_factory=list)
