#
# Declarative JSON message codec.
#
# A MessageType declares its fields once, loads the object tree produced by
# json.loads() into a read-only Message and dumps a Message back.
#

import base64
import binascii
import json

from .exceptions import DecodeError

# Types. -----------------------------------------------------------------


class UVarintType:
    # Represents an unsigned 32 bit integer.

    @staticmethod
    def dump(value):
        return value

    @staticmethod
    def load(value):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError('Expected integer, got %r' % (value,))
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError('Integer %d out of range' % value)
        return value


class SVarintType:
    # Represents a signed integer.

    @staticmethod
    def dump(value):
        return value

    @staticmethod
    def load(value):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError('Expected integer, got %r' % (value,))
        return value


class BoolType:
    # Represents a boolean type.

    @staticmethod
    def dump(value):
        return bool(value)

    @staticmethod
    def load(value):
        if not isinstance(value, bool):
            raise TypeError('Expected boolean, got %r' % (value,))
        return value


class UnicodeType:
    # Represents an unicode string type.

    @staticmethod
    def dump(value):
        return value

    @staticmethod
    def load(value):
        if not isinstance(value, str):
            raise TypeError('Expected string, got %r' % (value,))
        return value


class Base64Type:
    # Raw bytes carried as base64 text.

    @staticmethod
    def dump(value):
        return base64.b64encode(value).decode('ascii')

    @staticmethod
    def load(value):
        value = UnicodeType.load(value)
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as e:
            raise ValueError('Invalid base64 data: %s' % e)


# Messages. --------------------------------------------------------------

FLAG_SIMPLE = 0
FLAG_REQUIRED = 1
FLAG_REQUIRED_MASK = 1
FLAG_SINGLE = 0
FLAG_REPEATED = 2
FLAG_REPEATED_MASK = 6


class MessageType:
    # Represents a message type.

    def __init__(self, name=None):
        # Creates a new message type.
        self.__keys_to_types = {}  # Maps a JSON key to a type instance.
        self.__keys_to_names = {}  # Maps a JSON key to a given field name.
        self.__defaults = {}  # Maps a JSON key to its default value.
        self.__flags = {}  # Maps a JSON key to FLAG_
        self._name = name

    def add_field(self, key, name, field_type, flags=FLAG_SIMPLE, default=None):
        # Adds a field to the message type.
        if key in self.__keys_to_names or name in self.__keys_to_names.values():
            raise ValueError('The field %s is already used.' % key)
        if default is not None:
            self.__defaults[key] = default
        self.__keys_to_names[key] = name
        self.__keys_to_types[key] = field_type
        self.__flags[key] = flags
        return self  # Allow add_field chaining.

    def __call__(self, **fields):
        # Creates an instance of this message type.
        for name in fields:
            if name not in self.__keys_to_names.values():
                raise TypeError('Unknown field %s.%s' % (self._name, name))
        return Message(self, **fields)

    def __has_flag(self, key, flag, mask):
        # Checks whether the field with the specified key has the specified
        # flag.
        return (self.__flags[key] & mask) == flag

    def get_default(self, name):
        for key, field_name in self.__keys_to_names.items():
            if field_name == name:
                return self.__defaults.get(key, None)
        raise AttributeError('Unknown field %s.%s' % (self._name, name))

    def __dump_field(self, key, value):
        field_type = self.__keys_to_types[key]
        if self.__has_flag(key, FLAG_REPEATED, FLAG_REPEATED_MASK):
            # Repeated value.
            return [field_type.dump(v) for v in value]
        # Single value.
        return field_type.dump(value)

    def dump(self, value):
        if self != value.message_type:
            raise TypeError('Incompatible type')
        obj = {}
        for key, name in self.__keys_to_names.items():
            if name in value.__dict__:
                obj[key] = self.__dump_field(key, getattr(value, name))
            elif self.__has_flag(key, FLAG_REQUIRED, FLAG_REQUIRED_MASK):
                raise ValueError(
                    'The field %s is required but a value is missing.' % key)
        return obj

    def load(self, obj):
        if not isinstance(obj, dict):
            raise TypeError('%s must be a JSON object, got %s' %
                            (self._name, type(obj).__name__))
        fields = {}
        for key, field_type in self.__keys_to_types.items():
            name = self.__keys_to_names[key]
            value = obj.get(key)

            if value is None:
                # Fill in default value if value not set
                if key in self.__defaults:
                    fields[name] = self.__defaults[key]
                # Check if all required fields are present.
                elif self.__has_flag(key, FLAG_REQUIRED, FLAG_REQUIRED_MASK):
                    if self.__has_flag(key, FLAG_REPEATED, FLAG_REPEATED_MASK):
                        # Empty list (no values in input). But required field.
                        fields[name] = []
                    else:
                        raise ValueError(
                            'The field %s is required but missing.' % key)
                continue

            if self.__has_flag(key, FLAG_SINGLE, FLAG_REPEATED_MASK):
                # Single value.
                fields[name] = field_type.load(value)
            else:
                # Repeated value.
                if not isinstance(value, list):
                    raise TypeError('The field %s must be a list' % key)
                fields[name] = [field_type.load(v) for v in value]

        # Keys not declared on the type are ignored
        return Message(self, **fields)

    def equal(self, value, other):
        # Fields compare in their JSON form: the hwilib objects held by xpub,
        # PSBT and descriptor fields have no equality of their own.
        for key, name in self.__keys_to_names.items():
            if (name in value.__dict__) != (name in other.__dict__):
                return False
            if name in value.__dict__ and \
                    self.__dump_field(key, getattr(value, name)) != \
                    self.__dump_field(key, getattr(other, name)):
                return False
        return True

    def dumps(self, value):
        return json.dumps(self.dump(value))

    def loads(self, text):
        return load_value(self, parse(text))

    def __repr__(self):
        return '<MessageType: %s>' % self._name


class Message:
    # Represents a decoded, read-only message instance.

    def __init__(self, message_type, **fields):
        object.__setattr__(self, 'message_type', message_type)
        for key in fields:
            object.__setattr__(self, key, fields[key])

    def __setattr__(self, name, value):
        raise AttributeError('%s is read-only' % self.message_type._name)

    def dump(self):
        # Dumps the message into a JSON-compatible dict
        return self.message_type.dump(self)

    def dumps(self):
        return self.message_type.dumps(self)

    def __repr__(self):
        values = self.__dict__
        values = {k: values[k] for k in values if k != 'message_type'}
        return '<%s: %s>' % (self.message_type._name, values)

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)

        return self.message_type.get_default(name)

    def __eq__(self, other):
        if isinstance(other, MessageType):
            # If we have the same message type as the other object
            return self.message_type == other

        elif isinstance(other, Message):
            if self.message_type != other.message_type:
                # Those are two completely different types
                return False

            # If we compare two initialized messages, let's compare its content
            return self.message_type.equal(self, other)

        return NotImplemented

    __hash__ = None


# Parsing. ---------------------------------------------------------------

def parse(text):
    # Generic pass: text to untyped JSON value
    try:
        return json.loads(text)
    except ValueError as e:
        raise DecodeError('error %s while parsing %r' % (e, text), text)


def load_value(field_type, value):
    # Typed pass: untyped JSON value to message
    try:
        return field_type.load(value)
    except (TypeError, ValueError) as e:
        raise DecodeError('error %s while deserializing %s' %
                          (e, json.dumps(value)), value)
