from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LineSource(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str = "user"
    user_id: Optional[str] = Field(default=None, alias="userId")


class LineMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    id: Optional[str] = None
    text: Optional[str] = None


class LinePostback(BaseModel):
    model_config = ConfigDict(extra="allow")

    data: str = ""


class LineEvent(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str
    reply_token: Optional[str] = Field(default=None, alias="replyToken")
    source: Optional[LineSource] = None
    message: Optional[LineMessage] = None
    postback: Optional[LinePostback] = None

    @property
    def sender_id(self) -> Optional[str]:
        return self.source.user_id if self.source else None

    @property
    def is_text_message(self) -> bool:
        return self.type == "message" and self.message is not None and self.message.type == "text"

    @property
    def is_postback(self) -> bool:
        return self.type == "postback"


class LineWebhookBody(BaseModel):
    model_config = ConfigDict(extra="allow")

    destination: Optional[str] = None
    events: List[LineEvent] = Field(default_factory=list)


class HealthStatus(BaseModel):
    status: str
    requests: int
    request_streams: int
    locker_streams: int
