from .messages import ErrorCode


class HWIError(Exception):
    pass


class DecodeError(HWIError):
    # Response text could not be parsed as JSON or
    # did not have the shape of the expected message.
    def __init__(self, message, value=None):
        super().__init__(message)
        self.value = value


class EncodingError(HWIError):
    pass


class ProcessError(HWIError):
    pass


class InvalidOptionError(HWIError):
    pass


class MissingDeviceError(InvalidOptionError):
    pass


class EmbeddedError(HWIError):
    pass


class CallException(HWIError):
    def __init__(self, code, message):
        super().__init__()
        self.args = [code, message]

    @property
    def code(self):
        return self.args[0]

    @property
    def message(self):
        return self.args[1]

    def __str__(self):
        if self.code is None:
            return str(self.message)
        return '%s (%s, %d)' % (self.message, self.code.value, self.code.code)


class PinException(CallException):
    pass


class PassphraseException(CallException):
    pass


class ActionCancelledException(CallException):
    pass


class DeviceBusyException(CallException):
    pass


class DeviceNotFoundException(CallException):
    pass


_FAILURE_CLASSES = {
    ErrorCode.DeviceNotReady: PinException,
    ErrorCode.NoPassword: PassphraseException,
    ErrorCode.ActionCanceled: ActionCancelledException,
    ErrorCode.DeviceBusy: DeviceBusyException,
}


def failure(code, message):
    '''Build the exception for a tool-reported failure.

    `code` is an ErrorCode member, a signed integer as printed by HWI, or None.
    An integer outside the error code table raises DecodeError.
    '''
    if code is not None and not isinstance(code, ErrorCode):
        code = ErrorCode.from_code(code)
    return _FAILURE_CLASSES.get(code, CallException)(code, message)
