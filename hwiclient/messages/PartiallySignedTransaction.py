from .. import wire as p
from ..types import PsbtType

PartiallySignedTransaction = p.MessageType('PartiallySignedTransaction')
PartiallySignedTransaction.add_field('psbt', 'psbt', PsbtType, flags=p.FLAG_REQUIRED)
PartiallySignedTransaction.add_field('signed', 'signed', p.BoolType)
