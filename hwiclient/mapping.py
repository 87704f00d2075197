from . import wire
from .messages import MESSAGES

map_name_to_class = {}


def build_map():
    '''For internal usage only, scans built-in messages and register them to client.'''
    for msg_name in MESSAGES:
        mod = __import__('hwiclient.messages', globals(), locals(), [msg_name, ])
        msg_class = getattr(mod, msg_name).__dict__[msg_name]
        register_type(msg_class)


def get_class(t):
    '''Return class of given type (must be registered with register_type()).'''
    if isinstance(t, wire.MessageType):
        return t
    return map_name_to_class[t]


def register_type(msg_class):
    '''Public method to register custom message type for later handling in the client.'''
    if msg_class._name in map_name_to_class:
        raise Exception("Message %s already handled by class %s" % (msg_class._name, str(get_class(msg_class._name))))
    map_name_to_class[msg_class._name] = msg_class


build_map()
