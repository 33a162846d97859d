"""Common schemas for the API."""

import typing as t

from ninja import ModelSchema, Schema
from pydantic import StringConstraints

from accounts.models import ClubUser

StrippedString = t.Annotated[str, StringConstraints(strip_whitespace=True)]
OneToTwoHundredString = t.Annotated[str, StringConstraints(min_length=1, max_length=200, strip_whitespace=True)]
OneToOneFiftyString = t.Annotated[str, StringConstraints(min_length=1, max_length=150, strip_whitespace=True)]


class VersionResponse(Schema):
    version: str


class ResponseOk(Schema):
    status: t.Literal["ok"] = "ok"


class MemberSchema(ModelSchema):
    class Meta:
        model = ClubUser
        fields = ("id", "username", "first_name", "last_name")
