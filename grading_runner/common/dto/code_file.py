from pydantic import Field

from grading_runner.common.dto.base import WireModel


class CodeFile(WireModel):
    file_name: str
    file_path: str
    content: str
    size: int = Field(ge=0)
