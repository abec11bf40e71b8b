"""Protected data and public info schemas"""
from datetime import datetime
from typing import List

from tokengate.schemas.auth import CamelModel


class UserInfoResponse(CamelModel):
    message: str
    username: str
    role: str
    timestamp: datetime
    data: List[str]


class AdminDataResponse(CamelModel):
    message: str
    secret_info: str
    access_level: str


class StatsResponse(CamelModel):
    user: str
    last_login: datetime
    total_requests: int
    active_since: datetime


class PublicInfoResponse(CamelModel):
    application: str
    version: str
    description: str
    endpoints: List[str]
