from .. import wire as p
from ..types import DeviceTypeType, FingerprintType

Device = p.MessageType('Device')
Device.add_field('type', 'device_type', DeviceTypeType, flags=p.FLAG_REQUIRED)
Device.add_field('model', 'model', p.UnicodeType, flags=p.FLAG_REQUIRED)
Device.add_field('path', 'path', p.UnicodeType, flags=p.FLAG_REQUIRED)
Device.add_field('label', 'label', p.UnicodeType)
Device.add_field('needs_pin_sent', 'needs_pin_sent', p.BoolType, flags=p.FLAG_REQUIRED)
Device.add_field('needs_passphrase_sent', 'needs_passphrase_sent', p.BoolType, flags=p.FLAG_REQUIRED)
Device.add_field('fingerprint', 'fingerprint', FingerprintType, flags=p.FLAG_REQUIRED)
