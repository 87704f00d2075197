from .. import wire as p

Signature = p.MessageType('Signature')
Signature.add_field('signature', 'signature', p.Base64Type, flags=p.FLAG_REQUIRED)
