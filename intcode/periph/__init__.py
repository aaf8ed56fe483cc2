from .channel import Channel, ChannelEmpty, ChannelFull, OverflowPolicy
from .console import ConsoleSource, parse_int, read_int, write_int

__all__ = [
    "Channel", "ChannelEmpty", "ChannelFull", "OverflowPolicy",
    "ConsoleSource", "parse_int", "read_int", "write_int",
]
