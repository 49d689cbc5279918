import datetime as dt
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


class CRMBaseModel(BaseModel):
    """
    Shared config for every stored CRM entity.

    Python code uses snake_case; the snapshot file and the dashboard
    payloads use camelCase (dealValue, nextFollowUp, ...).
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra='ignore'
    )

    id: str

    def to_payload(self) -> dict:
        """JSON-ready dict in the dashboard's camelCase shape."""
        return self.model_dump(mode="json", by_alias=True)
