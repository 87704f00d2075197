from .. import wire as p
from ..types import DescriptorType

_types = {}


def descriptor_type(parser=str):
    '''Return the Descriptor message type whose entries are parsed with `parser`.

    `parser` takes the descriptor text and returns either a string or an
    object exposing to_string(), such as hwilib.descriptor.parse_descriptor.
    One type is built per parser, so decoded messages of the same parser
    compare equal.
    '''
    message_type = _types.get(parser)
    if message_type is None:
        message_type = p.MessageType('Descriptor')
        field_type = DescriptorType(parser)
        message_type.add_field('receive', 'receive', field_type,
                               flags=p.FLAG_REQUIRED | p.FLAG_REPEATED)
        message_type.add_field('internal', 'internal', field_type,
                               flags=p.FLAG_REQUIRED | p.FLAG_REPEATED)
        _types[parser] = message_type
    return message_type


Descriptor = descriptor_type(str)
