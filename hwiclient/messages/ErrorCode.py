from enum import Enum


class ErrorCode(Enum):
    NoDeviceType = 'NO_DEVICE_TYPE'
    MissingArguments = 'MISSING_ARGUMENTS'
    DeviceConnError = 'DEVICE_CONN_ERROR'
    UnknownDeviceType = 'UNKNOWN_DEVICE_TYPE'
    InvalidTx = 'INVALID_TX'
    NoPassword = 'NO_PASSWORD'
    BadArgument = 'BAD_ARGUMENT'
    NotImplemented = 'NOT_IMPLEMENTED'
    UnavailableAction = 'UNAVAILABLE_ACTION'
    DeviceAlreadyInit = 'DEVICE_ALREADY_INIT'
    DeviceAlreadyUnlocked = 'DEVICE_ALREADY_UNLOCKED'
    DeviceNotReady = 'DEVICE_NOT_READY'
    UnknownError = 'UNKNOWN_ERROR'
    ActionCanceled = 'ACTION_CANCELED'
    DeviceBusy = 'DEVICE_BUSY'
    NeedToBeRoot = 'NEED_TO_BE_ROOT'
    HelpText = 'HELP_TEXT'
    DeviceNotInitialized = 'DEVICE_NOT_INITIALIZED'

    @property
    def code(self):
        return _CODE_BY_MEMBER[self]

    @staticmethod
    def from_code(code):
        # bool is an int subclass but never a valid code
        if isinstance(code, int) and not isinstance(code, bool):
            member = _MEMBER_BY_CODE.get(code)
            if member is not None:
                return member
        from ..exceptions import DecodeError
        raise DecodeError('Unknown HWI error code %r' % (code,), code)


# Signed codes as printed by HWI (hwilib/errors.py)
_TABLE = (
    (ErrorCode.NoDeviceType, -1),
    (ErrorCode.MissingArguments, -2),
    (ErrorCode.DeviceConnError, -3),
    (ErrorCode.UnknownDeviceType, -4),
    (ErrorCode.InvalidTx, -5),
    (ErrorCode.NoPassword, -6),
    (ErrorCode.BadArgument, -7),
    (ErrorCode.NotImplemented, -8),
    (ErrorCode.UnavailableAction, -9),
    (ErrorCode.DeviceAlreadyInit, -10),
    (ErrorCode.DeviceAlreadyUnlocked, -11),
    (ErrorCode.DeviceNotReady, -12),
    (ErrorCode.UnknownError, -13),
    (ErrorCode.ActionCanceled, -14),
    (ErrorCode.DeviceBusy, -15),
    (ErrorCode.NeedToBeRoot, -16),
    (ErrorCode.HelpText, -17),
    (ErrorCode.DeviceNotInitialized, -18),
)

_CODE_BY_MEMBER = dict(_TABLE)
_MEMBER_BY_CODE = dict((code, member) for member, code in _TABLE)
