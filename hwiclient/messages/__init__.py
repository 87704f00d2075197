from .AddressType import AddressType
from .Chain import Chain
from .DeviceType import DeviceType
from .ErrorCode import ErrorCode
from .LogLevel import LogLevel
from .Subcommand import Subcommand, GLOBAL_SUBCOMMANDS

# Wire messages registered by mapping.build_map()
MESSAGES = (
    'Address',
    'Descriptor',
    'Device',
    'DeviceInternal',
    'ExtendedPubKey',
    'Failure',
    'KeyPoolElement',
    'PartiallySignedTransaction',
    'Signature',
    'Status',
)
