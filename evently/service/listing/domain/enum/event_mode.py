from enum import StrEnum


class EventMode(StrEnum):
    ONLINE = 'online'
    OFFLINE = 'offline'
    HYBRID = 'hybrid'
