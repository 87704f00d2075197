from .. import wire as p
from ..types import XpubType

ExtendedPubKey = p.MessageType('ExtendedPubKey')
ExtendedPubKey.add_field('xpub', 'xpub', XpubType, flags=p.FLAG_REQUIRED)
