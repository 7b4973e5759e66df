import datetime

import pytest

from docodm.consistency import ScanConsistency
from docodm.consts import TTL_IN_SECONDS_INCLUSIVE_END
from docodm.exceptions import InvalidExpiryError
from docodm.models.metadata import DocumentMetadata, Expiry

NOW = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)


def test_no_expiry_by_default():
    assert DocumentMetadata().get_expiry() == 0


def test_default_unit_is_seconds():
    assert Expiry(78).resolve() == 78


def test_boundary_is_relative():
    expiry = Expiry(seconds=2_592_000)
    assert expiry.is_relative
    assert expiry.resolve(NOW) == TTL_IN_SECONDS_INCLUSIVE_END


def test_thirty_days_still_in_seconds():
    assert Expiry(days=30).resolve(NOW) == 30 * 24 * 60 * 60


def test_just_over_boundary_is_absolute():
    expiry = Expiry(seconds=2_592_001)
    assert not expiry.is_relative
    assert expiry.resolve(NOW) == int(NOW.timestamp()) + 2_592_001


def test_thirty_one_days_is_unix_utc_time():
    resolved = Expiry(days=31).resolve(NOW)
    assert datetime.datetime.fromtimestamp(resolved, datetime.timezone.utc) == NOW + datetime.timedelta(days=31)


def test_absolute_expiry_defaults_to_current_time():
    before = int(datetime.datetime.now(datetime.timezone.utc).timestamp())
    resolved = Expiry(days=31).resolve()
    after = int(datetime.datetime.now(datetime.timezone.utc).timestamp())
    assert before + 31 * 86400 <= resolved <= after + 31 * 86400


def test_units_are_summed():
    assert Expiry(seconds=1, minutes=1, hours=1, days=1).total_seconds == 1 + 60 + 3600 + 86400
    assert Expiry.from_timedelta(datetime.timedelta(hours=2)).total_seconds == 7200


def test_negative_expiry_is_rejected():
    with pytest.raises(InvalidExpiryError):
        Expiry(seconds=-1)


def test_touch_on_read_requires_expiry():
    assert not DocumentMetadata(touch_on_read=True).is_touch_on_read
    assert not DocumentMetadata(expiry=Expiry(10)).is_touch_on_read
    assert DocumentMetadata(expiry=Expiry(10), touch_on_read=True).is_touch_on_read


def test_metadata_carries_score_and_consistency():
    metadata = DocumentMetadata(score_property="relevance", consistency=ScanConsistency.REQUEST_PLUS)
    assert metadata.score_property == "relevance"
    assert metadata.consistency is ScanConsistency.REQUEST_PLUS
