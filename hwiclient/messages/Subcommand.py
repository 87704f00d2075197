from enum import Enum


class Subcommand(Enum):
    Enumerate = 'enumerate'
    GetMasterXpub = 'getmasterxpub'
    SignTx = 'signtx'
    GetXpub = 'getxpub'
    SignMessage = 'signmessage'
    GetKeypool = 'getkeypool'
    GetDescriptors = 'getdescriptors'
    DisplayAddress = 'displayaddress'
    Setup = 'setup'
    Wipe = 'wipe'
    Restore = 'restore'
    Backup = 'backup'
    PromptPin = 'promptpin'
    SendPin = 'sendpin'
    TogglePassphrase = 'togglepassphrase'
    InstallUdevRules = 'installudevrules'

    def __str__(self):
        return self.value


# Subcommands that never address a specific device
GLOBAL_SUBCOMMANDS = (Subcommand.Enumerate, Subcommand.InstallUdevRules)
