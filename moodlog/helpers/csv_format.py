"""Tabular export format.

    id,ts,mood,videoUri,lat,lng
    1,2025-11-26T09:35:13.123Z,4,"/data/videos/sample_2025-11-26T09-35-12-001Z.mp4",25.033,121.5654

Only ``videoUri`` is quoted; numbers and the timestamp are written as-is.
Lines end with ``\\n``.
"""
import csv
import io
from typing import Iterable, List

from moodlog.models.sample import Location, Sample

HEADER = ("id", "ts", "mood", "videoUri", "lat", "lng")
LINE_TERMINATOR = "\n"


def quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def render_row(sample: Sample) -> str:
    return ",".join([
        str(sample.id),
        sample.timestamp,
        str(sample.mood),
        quote(sample.video_ref or ""),
        repr(float(sample.lat)),
        repr(float(sample.lng)),
    ])


def render_table(samples: Iterable[Sample]) -> str:
    lines = [",".join(HEADER)]
    lines.extend(render_row(sample) for sample in samples)
    return LINE_TERMINATOR.join(lines) + LINE_TERMINATOR


def parse_table(text: str) -> List[Sample]:
    """Read an exported table back into samples"""
    reader = csv.reader(io.StringIO(text, newline=""))
    header = next(reader, None)
    if header is None:
        return []
    if tuple(header) != HEADER:
        raise ValueError(f"Unexpected header: {header}")

    samples = []
    for row in reader:
        if not row:
            continue
        id_, ts, mood, video_uri, lat, lng = row
        samples.append(Sample(
            id=int(id_),
            timestamp=ts,
            mood=int(mood),
            video_ref=video_uri,
            location=Location(lat=float(lat), lng=float(lng)),
        ))
    return samples
