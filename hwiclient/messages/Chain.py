from enum import Enum


class Chain(Enum):
    Main = 'main'
    Test = 'test'
    RegTest = 'regtest'
    SigNet = 'signet'

    def __str__(self):
        return self.value
