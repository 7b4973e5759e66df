import datetime
from dataclasses import dataclass
from typing import Optional

from docodm.consistency import ScanConsistency
from docodm.consts import TTL_IN_SECONDS_INCLUSIVE_END
from docodm.exceptions import InvalidExpiryError


@dataclass(frozen=True)
class Expiry:
    seconds: int = 0
    minutes: int = 0
    hours: int = 0
    days: int = 0

    def __post_init__(self):
        if self.total_seconds < 0:
            raise InvalidExpiryError(f"expiry must not be negative, got {self.total_seconds} seconds")

    @classmethod
    def from_timedelta(cls, delta: datetime.timedelta) -> "Expiry":
        return cls(seconds=int(delta.total_seconds()))

    @property
    def total_seconds(self) -> int:
        return self.seconds + 60 * self.minutes + 3600 * self.hours + 86400 * self.days

    @property
    def is_relative(self) -> bool:
        return self.total_seconds <= TTL_IN_SECONDS_INCLUSIVE_END

    def resolve(self, now: Optional[datetime.datetime] = None) -> int:
        """Expiry as the store expects it.

        Up to and including 30 days this is the TTL in seconds; longer
        expiries become an absolute Unix timestamp (UTC) counted from `now`.
        """
        shift = self.total_seconds
        if self.is_relative:
            return shift
        now = now or datetime.datetime.now(datetime.timezone.utc)
        return int((now + datetime.timedelta(seconds=shift)).timestamp())


@dataclass(frozen=True)
class DocumentMetadata:
    expiry: Optional[Expiry] = None
    touch_on_read: bool = False
    score_property: Optional[str] = None
    consistency: Optional[ScanConsistency] = None

    def get_expiry(self, now: Optional[datetime.datetime] = None) -> int:
        if self.expiry is None:
            return 0
        return self.expiry.resolve(now)

    @property
    def is_touch_on_read(self) -> bool:
        return self.touch_on_read and self.get_expiry() > 0


NO_METADATA = DocumentMetadata()
