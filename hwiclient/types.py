import binascii

from hwilib.key import ExtendedKey
from hwilib.psbt import PSBT

from . import tools
from .messages import DeviceType
from .wire import UnicodeType


class Fingerprint:
    # First 4 bytes of HASH160 of the master public key

    def __init__(self, data):
        if len(data) != 4:
            raise ValueError('Fingerprint must be 4 bytes, got %d' % len(data))
        self.data = bytes(data)

    @classmethod
    def from_string(cls, s):
        try:
            return cls(binascii.unhexlify(s))
        except (binascii.Error, TypeError) as e:
            raise ValueError('Invalid fingerprint %r: %s' % (s, e))

    def __str__(self):
        return binascii.hexlify(self.data).decode('ascii')

    def __repr__(self):
        return '<Fingerprint: %s>' % self

    def __eq__(self, other):
        if isinstance(other, Fingerprint):
            return self.data == other.data
        if isinstance(other, str):
            return str(self) == other.lower()
        return NotImplemented

    def __hash__(self):
        return hash(self.data)


def xpub_from_string(xpub):
    # hwilib trusts the base58 checksum and the key bytes, check them first
    data = tools.b58decode_check(xpub)
    if len(data) != 78:
        raise ValueError('Extended key must be 78 bytes, got %d' % len(data))
    if data[45] not in (2, 3):
        raise ValueError('Extended key does not hold a compressed public key')
    return ExtendedKey.deserialize(xpub)


def psbt_from_base64(s):
    psbt = PSBT()
    try:
        psbt.deserialize(s)
    except Exception as e:
        # PSBTSerializationError, binascii.Error and struct.error alike
        raise ValueError('Invalid PSBT: %s' % e)
    return psbt


def descriptor_to_string(desc):
    # Descriptors are either plain strings or objects exposing to_string(),
    # e.g. hwilib.descriptor.Descriptor
    if isinstance(desc, str):
        return desc
    to_string = getattr(desc, 'to_string', None)
    if to_string is None:
        raise TypeError('%s cannot be used as a descriptor' % type(desc).__name__)
    return to_string()


# Field types. -----------------------------------------------------------

class FingerprintType:

    @staticmethod
    def dump(value):
        return str(value)

    @staticmethod
    def load(value):
        return Fingerprint.from_string(UnicodeType.load(value))


class DeviceTypeType:

    @staticmethod
    def dump(value):
        return str(value)

    @staticmethod
    def load(value):
        return DeviceType.from_string(UnicodeType.load(value))


class XpubType:

    @staticmethod
    def dump(value):
        return value.to_string()

    @staticmethod
    def load(value):
        return xpub_from_string(UnicodeType.load(value))


class PsbtType:

    @staticmethod
    def dump(value):
        return value.serialize()

    @staticmethod
    def load(value):
        return psbt_from_base64(UnicodeType.load(value))


class DescriptorType:
    # Parses each descriptor string with a caller supplied parser

    def __init__(self, parser=str):
        self.parser = parser

    def dump(self, value):
        return descriptor_to_string(value)

    def load(self, value):
        value = UnicodeType.load(value)
        try:
            return self.parser(value)
        except (TypeError, ValueError):
            raise
        except Exception as e:
            # Third party parsers raise their own error classes
            raise ValueError('Cannot parse descriptor %r: %s' % (value, e))
