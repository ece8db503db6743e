"""lifereel - browse photos of a person as an age timeline.

The core is an age-based photo chronology engine: exact ages (and pregnancy
weeks), age buckets at two granularities, a canonical bucket order, bucket
label to date window resolution, and slideshow scrub playback.

Quick Start:
    >>> from lifereel.core import Bucketizer, BucketOrderer, Granularity
    >>> buckets = Bucketizer().group(photos, birth, Granularity.FINE)
    >>> ordered = BucketOrderer().order(buckets)

CLI Usage:
    $ lifereel age 2024-01-15 2024-03-20
    $ lifereel buckets ~/Pictures/ada --birth 2024-01-15
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
