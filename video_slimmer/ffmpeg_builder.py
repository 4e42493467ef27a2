"""
FFmpeg command building from planned operations
"""

from collections import Counter
from pathlib import Path
from typing import List, Sequence

from .models import Convert, Operation


def codec_argument(op: Operation, position: int) -> List[str]:
    """The `-c:<v|a|s>:<position>` flag and its values for one operation.

    position counts output streams of the same type, in plan order.
    """
    flag = f'-c:{op.stream_type.value}:{position}'
    if isinstance(op.kind, Convert):
        return [flag, op.kind.codec, *op.kind.arguments]
    return [flag, 'copy']


def map_argument(op: Operation) -> List[str]:
    """The `-map` flag selecting the operation's input stream"""
    return ['-map', f'0:{op.stream_index}']


def remove_duplicates(groups: Sequence[List[str]]) -> List[List[str]]:
    """Drop repeated argument groups, keeping the first occurrence of each"""
    unique = []
    for group in groups:
        if group not in unique:
            unique.append(group)
    return unique


def codec_arguments(operations: Sequence[Operation]) -> List[List[str]]:
    """Codec groups addressed to each output stream, so copied and converted
    streams of one type can share a file"""
    positions = Counter()
    groups = []
    for op in operations:
        groups.append(codec_argument(op, positions[op.stream_type]))
        positions[op.stream_type] += 1
    return groups


def build_ffmpeg_args(inp: Path, out: Path, operations: Sequence[Operation]) -> List[str]:
    """Build ffmpeg arguments: input, codec selections, stream maps, output.

    Output streams follow the `-map` order, which is the plan order.
    """
    groups = codec_arguments(operations) + [map_argument(op) for op in operations]
    args = ['-i', str(inp)]
    for group in remove_duplicates(groups):
        args.extend(group)
    args.append(str(out))
    return args


def build_ffmpeg_cmd(ffmpeg: Path, inp: Path, out: Path, operations: Sequence[Operation]) -> List[str]:
    """Build the full ffmpeg command line for a plan"""
    return [str(ffmpeg)] + build_ffmpeg_args(inp, out, operations)
