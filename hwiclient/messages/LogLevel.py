from enum import Enum


class LogLevel(Enum):
    Debug = 10
    Info = 20
    Warning = 30
    Error = 40
    Critical = 50
