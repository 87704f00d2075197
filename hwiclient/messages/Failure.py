from .. import wire as p

# Printed by HWI instead of the expected result when a command fails
Failure = p.MessageType('Failure')
Failure.add_field('error', 'error', p.UnicodeType, flags=p.FLAG_REQUIRED)
Failure.add_field('code', 'code', p.SVarintType)
