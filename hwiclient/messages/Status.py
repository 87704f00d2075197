from .. import wire as p

Status = p.MessageType('Status')
Status.add_field('success', 'success', p.BoolType, flags=p.FLAG_REQUIRED)
