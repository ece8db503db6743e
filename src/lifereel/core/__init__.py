"""Age-based photo chronology engine.

- **AgeCalculator**: exact age (or pregnancy week) at any instant
- **Bucketizer**: partition photos into labeled age buckets
- **BucketOrderer**: canonical bucket order and the display toggle
- **DateRangeResolver**: label back to the date window it denotes
- **ScrubPlayer**: slideshow position over a sorted photo sequence

Example:
    >>> from lifereel.core import Bucketizer, BucketOrderer, Granularity
    >>>
    >>> buckets = Bucketizer().group(person.photos, person.date_of_birth, Granularity.FINE)
    >>> for bucket in BucketOrderer().order(buckets):
    ...     print(bucket.title, bucket.count)
"""

from lifereel.core.age import Age, AgeCalculator, AgeComponents, PregnancyPosition
from lifereel.core.bucketing import Bucketizer
from lifereel.core.errors import ChronologyError, InvalidInputError, UnresolvableLabelError
from lifereel.core.labels import (
    BeforePregnancyLabel,
    BirthMonthLabel,
    BucketLabel,
    MonthLabel,
    OtherLabel,
    PregnancyLabel,
    PregnancyWeekLabel,
    YearLabel,
    parse_label,
)
from lifereel.core.models import (
    BirthMonthsDisplay,
    Bucket,
    Granularity,
    Person,
    Photo,
    SortOrder,
)
from lifereel.core.ordering import BucketOrderer, YearOrder
from lifereel.core.playback import PlaybackState, ScrubPlayer
from lifereel.core.ranges import DateRange, DateRangeResolver, end_of_day, fallback_window

__all__ = [
    # Age
    "Age",
    "AgeCalculator",
    "AgeComponents",
    "PregnancyPosition",
    # Labels
    "BucketLabel",
    "PregnancyWeekLabel",
    "BeforePregnancyLabel",
    "PregnancyLabel",
    "BirthMonthLabel",
    "MonthLabel",
    "YearLabel",
    "OtherLabel",
    "parse_label",
    # Models
    "Person",
    "Photo",
    "Bucket",
    "Granularity",
    "SortOrder",
    "BirthMonthsDisplay",
    # Engine
    "Bucketizer",
    "BucketOrderer",
    "YearOrder",
    "DateRange",
    "DateRangeResolver",
    "end_of_day",
    "fallback_window",
    "ScrubPlayer",
    "PlaybackState",
    # Errors
    "ChronologyError",
    "InvalidInputError",
    "UnresolvableLabelError",
]
