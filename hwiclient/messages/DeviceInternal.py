from .. import wire as p
from ..types import DeviceTypeType, FingerprintType

# One entry of the enumerate array. HWI reports a device it could not open
# inline, with `error` and `code` set and the remaining fields missing.
DeviceInternal = p.MessageType('DeviceInternal')
DeviceInternal.add_field('type', 'device_type', DeviceTypeType)
DeviceInternal.add_field('model', 'model', p.UnicodeType)
DeviceInternal.add_field('path', 'path', p.UnicodeType)
DeviceInternal.add_field('label', 'label', p.UnicodeType)
DeviceInternal.add_field('needs_pin_sent', 'needs_pin_sent', p.BoolType)
DeviceInternal.add_field('needs_passphrase_sent', 'needs_passphrase_sent', p.BoolType)
DeviceInternal.add_field('fingerprint', 'fingerprint', FingerprintType)
DeviceInternal.add_field('error', 'error', p.UnicodeType)
DeviceInternal.add_field('code', 'code', p.SVarintType)
