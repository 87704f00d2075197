"""Decoding of HWI responses into messages.

Strict decoding (`deserialize`) is used for every single-result command: any
parse or shape error fails the whole call, and a failure object printed by HWI
is raised as the matching exception.

Tolerant decoding (`deserialize_devices`) is only used for enumeration, where
HWI reports devices it could not open inline in the result array.
"""

from . import mapping
from . import wire
from .exceptions import DecodeError, failure


def _check_failure(value):
    # {"error": ..., "code": ...} replaces the result on failure
    if isinstance(value, dict) and 'error' in value:
        msg = wire.load_value(mapping.get_class('Failure'), value)
        raise failure(msg.code, msg.error)


def check_failure(text):
    '''Raise the failure HWI printed as `text`, if the text is one.'''
    try:
        value = wire.parse(text)
    except DecodeError:
        return
    _check_failure(value)


def deserialize(text, message_type):
    message_type = mapping.get_class(message_type)
    value = wire.parse(text)
    _check_failure(value)
    return wire.load_value(message_type, value)


def deserialize_list(text, message_type):
    message_type = mapping.get_class(message_type)
    value = wire.parse(text)
    _check_failure(value)
    if not isinstance(value, list):
        raise DecodeError('error expected a JSON array while deserializing %s' % text, value)
    return [wire.load_value(message_type, item) for item in value]


def check_status(text):
    status = deserialize(text, 'Status')
    if not status.success:
        raise failure(None, 'request returned with failure')


def device_from_internal(internal):
    '''Convert a DeviceInternal message to a Device.

    Returns the Device, or the exception describing why this entry is unusable.
    '''
    if internal.error is not None:
        try:
            return failure(internal.code, internal.error)
        except DecodeError as e:
            return e

    # Every field the tolerant type left optional is required from here on
    try:
        return wire.load_value(mapping.get_class('Device'), internal.dump())
    except DecodeError as e:
        return e


def deserialize_devices(text):
    '''Decode an enumerate response.

    Returns a list with one entry per reported device: a Device message, or
    the exception raised for that entry. Failure of one entry does not fail
    the others.
    '''
    value = wire.parse(text)
    _check_failure(value)
    if not isinstance(value, list):
        raise DecodeError('error expected a JSON array while deserializing %s' % text, value)

    DeviceInternal = mapping.get_class('DeviceInternal')
    devices = []
    for item in value:
        try:
            internal = wire.load_value(DeviceInternal, item)
        except DecodeError as e:
            devices.append(e)
            continue
        devices.append(device_from_internal(internal))
    return devices
