from datetime import datetime

from pydantic import Field, field_serializer

from grading_runner.common.config.constants import LogEntryType
from grading_runner.common.dto.base import WireModel, serialize_timestamp
from grading_runner.common.utils.time_utils import utc_now


class ExecutionLogEntry(WireModel):
    type: LogEntryType
    message: str
    timestamp: datetime = Field(default_factory=utc_now)

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return serialize_timestamp(value)
