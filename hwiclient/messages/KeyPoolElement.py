from .. import wire as p


class RangeType:
    # Inclusive [start, end] pair

    @staticmethod
    def dump(value):
        return list(value)

    @staticmethod
    def load(value):
        if not isinstance(value, list) or len(value) != 2:
            raise ValueError('Range must be a list of two integers, got %r' % (value,))
        start, end = [p.UVarintType.load(v) for v in value]
        if start > end:
            raise ValueError('Range start %d is after end %d' % (start, end))
        return (start, end)


KeyPoolElement = p.MessageType('KeyPoolElement')
KeyPoolElement.add_field('desc', 'desc', p.UnicodeType, flags=p.FLAG_REQUIRED)
KeyPoolElement.add_field('range', 'range', RangeType, flags=p.FLAG_REQUIRED)
KeyPoolElement.add_field('timestamp', 'timestamp', p.UnicodeType, flags=p.FLAG_REQUIRED)
KeyPoolElement.add_field('internal', 'internal', p.BoolType, flags=p.FLAG_REQUIRED)
KeyPoolElement.add_field('keypool', 'keypool', p.BoolType, flags=p.FLAG_REQUIRED)
KeyPoolElement.add_field('watchonly', 'watchonly', p.BoolType, flags=p.FLAG_REQUIRED)
KeyPoolElement.add_field('active', 'active', p.BoolType)
