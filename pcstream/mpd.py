"""Generation of a DASH MPD manifest for segmented point-cloud streams."""

from __future__ import annotations

import argparse
import logging
import os
import struct
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

MPD_NAMESPACE = "urn:mpeg:dash:schema:mpd:2011"
VERSION = "genmpd 0.1"

DEFAULT_DURATION = 10000
DEFAULT_REP_COUNT = 5
DEFAULT_SEQ_COUNT = 10
DEFAULT_FPS = 30
DEFAULT_MIN_BUFFER_TIME = 1000
DEFAULT_SEGMENT_DURATION = 30
DEFAULT_OUTPUT_FILE = "output.mpd"
DEFAULT_MEDIA_TEMPLATE = "$AdaptationSetID$.seg$Number%05d$.r$RepresentationID$.bin"
DEFAULT_INIT_TEMPLATE = "$AdaptationSetID$.init.r$RepresentationID$.bin"
DEFAULT_CODEC = "vpcc"
DEFAULT_PROFILE = "urn:mpeg:dash:profile:full:2011"
DEFAULT_MIME_TYPE = "video/mp5"

_ADAPTATION_SET_ID = "$AdaptationSetID$"
_REPRESENTATION_ID = "$RepresentationID$"
_NUMBER = "$Number%05d$"

ET.register_namespace("", MPD_NAMESPACE)


@dataclass
class MpdOptions:
    """Settings for one generated manifest; times are in milliseconds."""

    duration: int = DEFAULT_DURATION
    rep_count: int = DEFAULT_REP_COUNT
    seq_count: int = DEFAULT_SEQ_COUNT
    min_buffer_time: int = DEFAULT_MIN_BUFFER_TIME
    fps: int = DEFAULT_FPS
    segment_duration: int = DEFAULT_SEGMENT_DURATION
    output_file: str = DEFAULT_OUTPUT_FILE
    media_template: str = DEFAULT_MEDIA_TEMPLATE
    init_template: str = DEFAULT_INIT_TEMPLATE
    video_codec: str = DEFAULT_CODEC
    profile: str = DEFAULT_PROFILE
    mime_type: str = DEFAULT_MIME_TYPE


def file_size(path: str | os.PathLike[str]) -> int | None:
    """Size of ``path`` in bytes, or ``None`` if it cannot be read."""
    try:
        return os.stat(path).st_size
    except OSError:
        return None


def substitute_placeholders(
    template: str, adaptation_set_id: int, representation_id: int
) -> str:
    """Fill in the adaptation-set and representation identifiers of a template."""
    return template.replace(_ADAPTATION_SET_ID, str(adaptation_set_id)).replace(
        _REPRESENTATION_ID, str(representation_id)
    )


def calculate_total_bytes(
    template: str, adaptation_set_id: int, representation_id: int
) -> tuple[int, int]:
    """Sum the sizes of the consecutive segment files a template names.

    Segment numbers start at 1 and counting stops at the first missing or
    empty file.  Returns the byte total and the next unused segment number;
    a template without a number placeholder names a single file.
    """
    pattern = substitute_placeholders(template, adaptation_set_id, representation_id)
    logger.debug("segment file pattern: %s", pattern)
    total = 0
    number = 1
    while True:
        path = pattern.replace(_NUMBER, f"{number:05d}")
        size = file_size(path)
        if size is None or size <= 0:
            break
        total += size
        number += 1
        if path == pattern:
            break
    return total, number


def _f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _iso_duration(milliseconds: int) -> str:
    hours, rest = divmod(milliseconds, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)
    return f"PT{hours}H{minutes}M{seconds}.{millis:03d}S"


def _tag(name: str) -> str:
    return f"{{{MPD_NAMESPACE}}}{name}"


def _validate(options: MpdOptions) -> None:
    if options.fps <= 0:
        raise ValueError("fps must be positive")
    if options.segment_duration <= 0:
        raise ValueError("segment duration must be positive")
    if options.segment_duration < options.fps:
        raise ValueError("segment duration must be at least one second of frames")
    for name in ("duration", "rep_count", "seq_count", "min_buffer_time"):
        if getattr(options, name) < 0:
            raise ValueError(f"{name} must not be negative")


def build_mpd(options: MpdOptions) -> ET.Element:
    """Build the manifest document for ``options``."""
    _validate(options)
    timescale = options.fps
    segments = int(
        (options.duration / 1000.0) / _f32(options.segment_duration / timescale)
    )
    last_duration = (options.duration % 1000) * timescale // 1000
    seconds_per_segment = options.segment_duration // timescale

    root = ET.Element(
        _tag("MPD"),
        {
            "type": "static",
            "profiles": options.profile,
            "minBufferTime": _iso_duration(options.min_buffer_time),
            "mediaPresentationDuration": _iso_duration(options.duration),
        },
    )
    period = ET.SubElement(root, _tag("Period"))

    for seq in range(options.seq_count):
        aset = ET.SubElement(
            period,
            _tag("AdaptationSet"),
            {
                "id": str(seq),
                "mimeType": options.mime_type,
                "segmentAlignment": "true",
                "bitstreamSwitching": "true",
            },
        )
        for rep_id in range(options.rep_count):
            media_bytes, seg_count = calculate_total_bytes(
                options.media_template, seq, rep_id
            )
            init_bytes, _ = calculate_total_bytes(options.init_template, seq, rep_id)
            bandwidth = (media_bytes + init_bytes) // (seg_count + 1) // seconds_per_segment

            rep = ET.SubElement(
                aset,
                _tag("Representation"),
                {
                    "id": str(rep_id),
                    "codecs": f"{options.video_codec}.{rep_id}",
                    "bandwidth": str(bandwidth),
                    "frameRate": str(options.fps),
                },
            )
            template = ET.SubElement(
                rep,
                _tag("SegmentTemplate"),
                {
                    "timescale": str(timescale),
                    "media": options.media_template,
                    "initialization": options.init_template,
                    "startNumber": "1",
                },
            )
            timeline = ET.SubElement(template, _tag("SegmentTimeline"))
            # The repeat count leaves out the initialization segment and the entry itself.
            ET.SubElement(
                timeline,
                _tag("S"),
                {
                    "t": "0",
                    "d": str(options.segment_duration),
                    "r": str(segments - 2),
                },
            )
            if last_duration > 0:
                ET.SubElement(
                    timeline,
                    _tag("S"),
                    {
                        "t": str(options.segment_duration * segments),
                        "d": str(last_duration),
                    },
                )
    return root


def write_mpd(options: MpdOptions) -> Path:
    """Build the manifest and write it to ``options.output_file``."""
    root = build_mpd(options)
    tree = ET.ElementTree(root)
    ET.indent(tree, space=" ")
    path = Path(options.output_file)
    tree.write(path, encoding="utf-8", xml_declaration=True)
    return path


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="genmpd", description="Generate a DASH MPD manifest."
    )
    parser.add_argument("--version", action="version", version=VERSION)
    parser.add_argument("-d", "--duration", type=int, default=DEFAULT_DURATION,
                        help="Total video duration in ms")
    parser.add_argument("-r", "--rep-count", type=int, default=DEFAULT_REP_COUNT,
                        help="Number of representations")
    parser.add_argument("-s", "--seq-count", type=int, default=DEFAULT_SEQ_COUNT,
                        help="Number of adaptation sets")
    parser.add_argument("-p", "--profile", default=DEFAULT_PROFILE, help="MPD profile")
    parser.add_argument("--min-buffer-time", type=int, default=DEFAULT_MIN_BUFFER_TIME,
                        help="Minimum buffer time in ms")
    parser.add_argument("--mime-type", default=DEFAULT_MIME_TYPE,
                        help="mimeType of the adaptation sets")
    parser.add_argument("-f", "--fps", type=int, default=DEFAULT_FPS,
                        help="Frames per second")
    parser.add_argument("-t", "--segment-duration", type=int,
                        default=DEFAULT_SEGMENT_DURATION,
                        help="Segment duration (in timescale units)")
    parser.add_argument("-c", "--codec", dest="video_codec", default=DEFAULT_CODEC,
                        help="Codec used for video compression")
    parser.add_argument("-o", "--output", dest="output_file", default=DEFAULT_OUTPUT_FILE,
                        help="Output MPD file")
    parser.add_argument("-m", "--media-template", default=DEFAULT_MEDIA_TEMPLATE,
                        help="Segment media file template")
    parser.add_argument("-i", "--init-template", default=DEFAULT_INIT_TEMPLATE,
                        help="Initialization segment template")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point."""
    args = _parser().parse_args(argv)
    options = MpdOptions(**vars(args))
    write_mpd(options)
    return 0